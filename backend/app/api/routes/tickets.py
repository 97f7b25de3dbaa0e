"""
Ticket type endpoints: CRUD, sale registration and lot cloning.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_active_subscription, require_role, require_plan
from app.db.session import get_db
from app.schemas.common import MessageResponse
from app.schemas.session import RequestContext
from app.schemas.ticket import (
    TicketCreate,
    TicketUpdate,
    TicketFilters,
    TicketCloneOptions,
    TicketBatchCloneRequest,
    TicketBatchCloneResponse,
    StockUpdateRequest,
    TicketResponse,
)
from app.services import ticket_service
from app.services.cache_service import invalidate_event_cache
from app.core.errors import ValidationError

router = APIRouter(prefix="/tickets", tags=["Tickets"])

TICKET_EDITORS = ["admin", "manager"]
guarded = [Depends(require_active_subscription)]


@router.get("", response_model=list[TicketResponse], dependencies=guarded)
async def list_tickets(
    event_id: Optional[UUID] = Query(None, alias="eventId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    category: Optional[str] = Query(None),
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    filters = TicketFilters(event_id=event_id, is_active=is_active, category=category)
    return await ticket_service.find_all_by_company(db, context.company.id, filters)


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=guarded,
)
async def create_ticket(
    ticket_data: TicketCreate,
    context: RequestContext = Depends(require_role(TICKET_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    ticket = await ticket_service.create(db, ticket_data, context.user.id, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return ticket


@router.post(
    "/clone-batch",
    response_model=TicketBatchCloneResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=guarded + [Depends(require_plan(["premium", "enterprise"]))],
)
async def clone_ticket_batch(
    clone_data: TicketBatchCloneRequest,
    context: RequestContext = Depends(require_role(TICKET_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    """Clone the current lot of an event into a new lot."""
    if not clone_data.eventId:
        raise ValidationError(
            message="O campo eventId é obrigatório.",
            action="Forneça o ID do evento cujos ingressos serão clonados.",
        )

    options = TicketCloneOptions(**clone_data.model_dump(exclude={"eventId"}))
    tickets = await ticket_service.clone_batch(
        db, clone_data.eventId, options, context.user.id, context.company.id
    )
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return TicketBatchCloneResponse(
        message="Lote de ingressos clonado com sucesso.",
        clonedCount=len(tickets),
        tickets=[TicketResponse.model_validate(t) for t in tickets],
    )


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: UUID,
    company_id: Optional[UUID] = Query(None, alias="companyId"),
    db: AsyncSession = Depends(get_db),
):
    """Public ticket lookup for storefronts; the company must be named explicitly."""
    if company_id is None:
        raise ValidationError(
            message="O parâmetro companyId é obrigatório.",
            action="Informe o companyId na query string.",
        )
    return await ticket_service.find_one_by_id(db, ticket_id, company_id)


@router.patch("/{ticket_id}", response_model=TicketResponse, dependencies=guarded)
async def update_ticket(
    ticket_id: UUID,
    ticket_data: TicketUpdate,
    context: RequestContext = Depends(require_role(TICKET_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    ticket = await ticket_service.update(db, ticket_id, ticket_data, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return ticket


@router.delete("/{ticket_id}", response_model=MessageResponse, dependencies=guarded)
async def delete_ticket(
    ticket_id: UUID,
    context: RequestContext = Depends(require_role(TICKET_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    await ticket_service.delete_by_id(db, ticket_id, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return MessageResponse(message="Ingresso excluído com sucesso.")


@router.post(
    "/{ticket_id}/clone",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=guarded,
)
async def clone_ticket(
    ticket_id: UUID,
    options: Optional[TicketCloneOptions] = None,
    context: RequestContext = Depends(require_role(TICKET_EDITORS)),
    db: AsyncSession = Depends(get_db),
):
    options = options or TicketCloneOptions()
    ticket = await ticket_service.clone(db, ticket_id, options, context.user.id, context.company.id)
    await db.commit()
    await invalidate_event_cache(context.company.id)
    return ticket


@router.post("/{ticket_id}/stock", response_model=TicketResponse, dependencies=guarded)
async def register_sale(
    ticket_id: UUID,
    stock_data: StockUpdateRequest,
    context: RequestContext = Depends(require_role(["admin", "manager", "operator"])),
    db: AsyncSession = Depends(get_db),
):
    """Atomically move `quantity` units from available to sold."""
    return await ticket_service.update_stock(db, ticket_id, stock_data.quantity, context.company.id)
