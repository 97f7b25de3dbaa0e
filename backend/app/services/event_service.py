"""
Event service handling CRUD operations.

Events are scoped to a company. Slugs are unique per company (compared
case-insensitively) and are generated from the event name when the caller
does not supply one.
"""

import re
import unicodedata
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.event import Event, VISIBILITY_CODES, SLUG_MAX_LENGTH
from app.models.ticket import Ticket
from app.schemas.event import EventCreate, EventUpdate, EventRecord, EventFilters
from app.services.patching import apply_patch, write_record, changed
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Used when a name has no characters left after slugification
FALLBACK_SLUG = "evento"

_ticket_types_count = (
    select(func.count(Ticket.id))
    .where(Ticket.event_id == Event.id, Ticket.is_active.is_(True))
    .correlate(Event)
    .scalar_subquery()
    .label("ticket_types_count")
)


def generate_slug_from_text(text: str) -> str:
    """
    "Show de Verão 2025!" -> "show-de-verao-2025"

    Accents are stripped via NFD decomposition, anything outside
    [a-z0-9 whitespace -] is dropped, whitespace runs become one hyphen.
    """
    normalized = unicodedata.normalize("NFD", text.lower())
    without_accents = "".join(c for c in normalized if not unicodedata.combining(c))
    cleaned = re.sub(r"[^a-z0-9\s-]", "", without_accents).strip()
    hyphenated = re.sub(r"\s+", "-", cleaned)
    return re.sub(r"-+", "-", hyphenated)[:SLUG_MAX_LENGTH]


async def generate_unique_slug(db: AsyncSession, event_name: str, company_id: UUID) -> str:
    base_slug = generate_slug_from_text(event_name) or FALLBACK_SLUG
    slug = base_slug
    counter = 1

    while await _slug_exists(db, slug, company_id):
        counter += 1
        suffix = f"-{counter}"
        slug = base_slug[: SLUG_MAX_LENGTH - len(suffix)] + suffix

    return slug


async def _fetch_one(db: AsyncSession, *criteria) -> Optional[Event]:
    result = await db.execute(
        select(Event, _ticket_types_count)
        .where(*criteria)
        .execution_options(populate_existing=True)
    )
    row = result.first()
    if row is None:
        return None
    event, count = row
    event.ticket_types_count = count
    return event


async def find_one_by_id(db: AsyncSession, event_id: UUID, company_id: UUID) -> Event:
    event = await _fetch_one(db, Event.id == event_id, Event.company_id == company_id)
    if not event:
        raise NotFoundError(
            message="O evento informado não foi encontrado no sistema.",
            action="Verifique se o ID está digitado corretamente.",
        )
    return event


async def find_one_by_slug(db: AsyncSession, slug: str, company_id: UUID) -> Event:
    event = await _fetch_one(
        db, func.lower(Event.slug) == slug.lower(), Event.company_id == company_id
    )
    if not event:
        raise NotFoundError(
            message="O evento informado não foi encontrado no sistema.",
            action="Verifique se o slug está digitado corretamente.",
        )
    return event


async def find_all_by_company(
    db: AsyncSession,
    company_id: UUID,
    filters: Optional[EventFilters] = None,
) -> list[Event]:
    """
    List a company's events, most recent start date first.
    Uses the ix_events_company_start_date index.
    """
    filters = filters or EventFilters()
    query = select(Event, _ticket_types_count).where(Event.company_id == company_id)

    if filters.active is not None:
        query = query.where(Event.active.is_(filters.active))
    if filters.start_date:
        query = query.where(Event.start_date >= filters.start_date)
    if filters.category:
        query = query.where(func.lower(Event.category) == filters.category.lower())

    result = await db.execute(
        query
        .order_by(Event.start_date.desc(), Event.event_name.asc())
        .execution_options(populate_existing=True)
    )

    events = []
    for event, count in result.all():
        event.ticket_types_count = count
        events.append(event)
    return events


async def create(db: AsyncSession, event_data: EventCreate, user_id: UUID, company_id: UUID) -> Event:
    if event_data.slug:
        await _validate_unique_slug(db, event_data.slug, company_id)
        slug = event_data.slug
    else:
        slug = await generate_unique_slug(db, event_data.event_name, company_id)

    values = event_data.model_dump(exclude={"slug", "visibility", "integration"})
    event = Event(
        user_id=user_id,
        company_id=company_id,
        slug=slug,
        visibility=VISIBILITY_CODES.get(event_data.visibility) if event_data.visibility else None,
        integration=_parse_integration(event_data.integration),
        **values,
    )
    db.add(event)
    await db.flush()

    logger.info("event_created", event_id=str(event.id), slug=event.slug, company_id=str(company_id))
    return await find_one_by_id(db, event.id, company_id)


async def update(db: AsyncSession, event_id: UUID, event_data: EventUpdate, company_id: UUID) -> Event:
    event = await find_one_by_id(db, event_id, company_id)

    if changed(event_data, "slug", event.slug):
        await _validate_unique_slug(db, event_data.slug, company_id, exclude_id=event.id)

    record = apply_patch(EventRecord, event, event_data)
    write_record(event, record)
    await db.flush()

    logger.info("event_updated", event_id=str(event.id), slug=event.slug)
    return await find_one_by_id(db, event.id, company_id)


async def delete_by_id(db: AsyncSession, event_id: UUID, company_id: UUID) -> Event:
    event = await find_one_by_id(db, event_id, company_id)

    if event.ticket_types_count > 0:
        raise ValidationError(
            message="Não é possível excluir um evento que possui ingressos ativos.",
            action="Desative ou exclua todos os ingressos deste evento antes de excluí-lo.",
        )

    try:
        await db.execute(
            delete(Ticket).where(Ticket.event_id == event.id, Ticket.company_id == company_id)
        )
        await db.execute(
            delete(Event).where(Event.id == event.id, Event.company_id == company_id)
        )
    except IntegrityError as e:
        # Inactive tickets that were already sold are still referenced by carts/checkouts
        raise ValidationError(
            message="Não é possível excluir um evento que possui vendas registradas.",
            action="Desative o evento em vez de excluí-lo.",
            cause=e,
        )

    logger.info("event_deleted", event_id=str(event.id), slug=event.slug)
    return event


def _parse_integration(value) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return value


async def _slug_exists(
    db: AsyncSession, slug: str, company_id: UUID, exclude_id: Optional[UUID] = None
) -> bool:
    query = select(Event.id).where(
        func.lower(Event.slug) == slug.lower(),
        Event.company_id == company_id,
    )
    if exclude_id is not None:
        query = query.where(Event.id != exclude_id)
    return (await db.execute(query.limit(1))).first() is not None


async def _validate_unique_slug(
    db: AsyncSession, slug: str, company_id: UUID, exclude_id: Optional[UUID] = None
) -> None:
    if await _slug_exists(db, slug, company_id, exclude_id):
        raise ValidationError(
            message="O slug informado já está sendo utilizado nesta empresa.",
            action="Utilize outro slug para realizar esta operação.",
        )
