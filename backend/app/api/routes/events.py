"""
Event endpoints with Redis caching on list operations.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_active_subscription, require_role
from app.db.session import get_db
from app.schemas.event import EventCreate, EventUpdate, EventFilters, EventResponse
from app.schemas.session import RequestContext
from app.schemas.ticket import TicketResponse
from app.services import event_service, ticket_service
from app.services.cache_service import get_cached_events, set_cached_events, invalidate_event_cache
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(
    prefix="/events",
    tags=["Events"],
    dependencies=[Depends(require_active_subscription)],
)

EVENT_EDITORS = ["admin", "manager"]


@router.get("", response_model=list[EventResponse])
async def list_events(
    active: Optional[bool] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    category: Optional[str] = Query(None),
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    """
    List the company's events.
    Results are cached in Redis per company and filter combination.
    """
    company_id = context.company.id
    filters = EventFilters(active=active, start_date=start_date, category=category)

    cached = await get_cached_events(company_id, filters)
    if cached is not None:
        logger.info("events_list_cache_hit", company_id=str(company_id))
        return cached

    events = await event_service.find_all_by_company(db, company_id, filters)
    listing = [EventResponse.model_validate(e) for e in events]

    await set_cached_events(company_id, filters, listing)
    return listing


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    context: RequestContext = Depends(require_role(EVENT_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.create(db, event_data, context.user.id, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return event


@router.get("/{slug}", response_model=EventResponse)
async def get_event(
    slug: str,
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    """Single event, read from the database (not cached)."""
    return await event_service.find_one_by_slug(db, slug, context.company.id)


@router.patch("/{slug}", response_model=EventResponse)
async def update_event(
    slug: str,
    event_data: EventUpdate,
    context: RequestContext = Depends(require_role(EVENT_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.find_one_by_slug(db, slug, context.company.id)
    updated = await event_service.update(db, event.id, event_data, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return updated


@router.delete("/{slug}", response_model=EventResponse)
async def delete_event(
    slug: str,
    context: RequestContext = Depends(require_role(EVENT_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.find_one_by_slug(db, slug, context.company.id)
    deleted = await event_service.delete_by_id(db, event.id, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return deleted


@router.get("/{slug}/tickets", response_model=list[TicketResponse])
async def list_event_tickets(
    slug: str,
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.find_one_by_slug(db, slug, context.company.id)
    return await ticket_service.find_all_by_event(db, event.id, context.company.id)
