"""
Ticket service: ticket types (lots) of an event.

STOCK SAFETY
============
`stock_sold` is only ever incremented by `update_stock`, which is one
conditional UPDATE:

    UPDATE tickets
       SET stock_sold = stock_sold + :qty
     WHERE id = :id AND company_id = :company
       AND (stock_total - stock_sold) >= :qty

The availability check and the increment happen in the same statement, so
concurrent sales can never push stock_sold past stock_total; the loser of a
race simply matches zero rows. The CHECK constraints on the table back this
up at the database level.

CLONING
=======
A clone is a new ticket type for the next batch (lot) of sales: prices are
scaled by a percentage, stock is reset and the code becomes "<code>-L<batch>"
with a numeric suffix when that code is already taken.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update as sql_update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.models.event import Event
from app.models.ticket import Ticket, CODE_MAX_LENGTH
from app.schemas.ticket import (
    TicketCreate,
    TicketUpdate,
    TicketRecord,
    TicketFilters,
    TicketCloneOptions,
)
from app.services import event_service
from app.services.patching import apply_patch, write_record, changed
from app.core.errors import NotFoundError, ValidationError
from app.core.metrics import record_stock_update, stock_update_latency
from app.core.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


async def find_one_by_id(db: AsyncSession, ticket_id: UUID, company_id: UUID) -> Ticket:
    result = await db.execute(
        select(Ticket)
        .where(Ticket.id == ticket_id, Ticket.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    ticket = result.scalar_one_or_none()
    if not ticket:
        raise NotFoundError(
            message="O ingresso informado não foi encontrado no sistema.",
            action="Verifique se o ID está digitado corretamente.",
        )
    return ticket


async def find_one_by_code(db: AsyncSession, code: str, company_id: UUID) -> Ticket:
    result = await db.execute(
        select(Ticket).where(Ticket.code == code, Ticket.company_id == company_id)
    )
    ticket = result.scalar_one_or_none()
    if not ticket:
        raise NotFoundError(
            message="O código informado não foi encontrado no sistema.",
            action="Verifique se o código está digitado corretamente.",
        )
    return ticket


async def find_all_by_event(db: AsyncSession, event_id: UUID, company_id: UUID) -> list[Ticket]:
    result = await db.execute(
        select(Ticket)
        .where(Ticket.event_id == event_id, Ticket.company_id == company_id)
        .order_by(Ticket.batch_no.asc(), Ticket.name.asc())
    )
    return list(result.scalars().all())


async def find_all_by_company(
    db: AsyncSession,
    company_id: UUID,
    filters: Optional[TicketFilters] = None,
) -> list[Ticket]:
    filters = filters or TicketFilters()
    query = (
        select(Ticket)
        .join(Event, Ticket.event_id == Event.id)
        .where(Ticket.company_id == company_id)
    )

    if filters.event_id:
        query = query.where(Ticket.event_id == filters.event_id)
    if filters.is_active is not None:
        query = query.where(Ticket.is_active.is_(filters.is_active))
    if filters.category:
        query = query.where(func.lower(Ticket.category) == filters.category.lower())

    result = await db.execute(query.order_by(Event.start_date.desc(), Ticket.name.asc()))
    return list(result.scalars().all())


async def create(db: AsyncSession, ticket_data: TicketCreate, user_id: UUID, company_id: UUID) -> Ticket:
    # Raises NotFound when the event belongs to another company
    await event_service.find_one_by_id(db, ticket_data.event_id, company_id)
    await _validate_unique_code(db, ticket_data.code, company_id)

    if ticket_data.stock_sold > ticket_data.stock_total:
        raise ValidationError(
            message="O estoque vendido não pode ser maior que o estoque total.",
            action="Ajuste os valores de estoque.",
        )

    ticket = Ticket(user_id=user_id, company_id=company_id, **ticket_data.model_dump())
    db.add(ticket)
    await db.flush()

    logger.info(
        "ticket_created",
        ticket_id=str(ticket.id),
        code=ticket.code,
        event_id=str(ticket.event_id),
        stock_total=ticket.stock_total,
    )
    return await find_one_by_id(db, ticket.id, company_id)


async def update(db: AsyncSession, ticket_id: UUID, ticket_data: TicketUpdate, company_id: UUID) -> Ticket:
    ticket = await find_one_by_id(db, ticket_id, company_id)

    if changed(ticket_data, "code", ticket.code):
        await _validate_unique_code(db, ticket_data.code, company_id, exclude_id=ticket.id)

    record = apply_patch(TicketRecord, ticket, ticket_data)
    if record.stock_total < ticket.stock_sold:
        raise ValidationError(
            message="O estoque total não pode ser menor que a quantidade já vendida.",
            action=f"Informe um estoque total de pelo menos {ticket.stock_sold}.",
        )

    write_record(ticket, record)
    await db.flush()

    logger.info("ticket_updated", ticket_id=str(ticket.id), code=ticket.code)
    return await find_one_by_id(db, ticket.id, company_id)


async def update_stock(db: AsyncSession, ticket_id: UUID, quantity: int, company_id: UUID) -> Ticket:
    """
    Register `quantity` sold units. Atomic; see module docstring.

    Zero rows matched means either the ticket is not visible to this company
    (NotFound) or there is not enough stock left (Validation).
    """
    with stock_update_latency.time():
        result = await db.execute(
            sql_update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.company_id == company_id,
                (Ticket.stock_total - Ticket.stock_sold) >= quantity,
            )
            .values(stock_sold=Ticket.stock_sold + quantity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

    if result.rowcount == 0:
        exists = (
            await db.execute(
                select(Ticket.id).where(Ticket.id == ticket_id, Ticket.company_id == company_id)
            )
        ).first()
        if not exists:
            record_stock_update("not_found")
            raise NotFoundError(
                message="O ingresso informado não foi encontrado no sistema.",
                action="Verifique se o ID está digitado corretamente.",
            )
        record_stock_update("insufficient")
        logger.warning("stock_insufficient", ticket_id=str(ticket_id), requested=quantity)
        raise ValidationError(
            message="Estoque insuficiente para realizar esta operação.",
            action="Verifique a disponibilidade do ingresso.",
        )

    record_stock_update("success")
    ticket = await find_one_by_id(db, ticket_id, company_id)
    logger.info(
        "stock_updated",
        ticket_id=str(ticket_id),
        quantity=quantity,
        stock_sold=ticket.stock_sold,
        stock_total=ticket.stock_total,
    )
    return ticket


async def delete_by_id(db: AsyncSession, ticket_id: UUID, company_id: UUID) -> Ticket:
    ticket = await find_one_by_id(db, ticket_id, company_id)

    if ticket.stock_sold > 0:
        raise ValidationError(
            message="Não é possível excluir um ingresso que já possui vendas.",
            action="Desative o ingresso em vez de excluí-lo.",
        )

    await db.execute(delete(Ticket).where(Ticket.id == ticket.id, Ticket.company_id == company_id))

    logger.info("ticket_deleted", ticket_id=str(ticket.id), code=ticket.code)
    return ticket


async def clone(
    db: AsyncSession,
    ticket_id: UUID,
    options: TicketCloneOptions,
    user_id: UUID,
    company_id: UUID,
) -> Ticket:
    original = await find_one_by_id(db, ticket_id, company_id)
    cloned = await _clone_ticket(db, original, options, user_id, company_id)
    return await find_one_by_id(db, cloned.id, company_id)


async def clone_batch(
    db: AsyncSession,
    event_id: UUID,
    options: TicketCloneOptions,
    user_id: UUID,
    company_id: UUID,
) -> list[Ticket]:
    """
    Clone the event's current lot into a new one.

    The current lot is the highest batch_no among the event's active
    tickets. Every clone lands in the same new batch: options.batchNo, or
    the current batch + 1.
    """
    await event_service.find_one_by_id(db, event_id, company_id)

    result = await db.execute(
        select(Ticket)
        .where(
            Ticket.event_id == event_id,
            Ticket.company_id == company_id,
            Ticket.is_active.is_(True),
        )
        .order_by(Ticket.batch_no.desc(), Ticket.name.asc())
    )
    tickets = list(result.scalars().all())
    if not tickets:
        raise ValidationError(
            message="O evento informado não possui ingressos ativos para clonar.",
            action="Cadastre ingressos para este evento antes de clonar o lote.",
        )

    current_batch = tickets[0].batch_no
    batch_options = options.model_copy(update={"batchNo": options.batchNo or current_batch + 1})

    cloned = []
    for original in tickets:
        if original.batch_no != current_batch:
            break
        cloned.append(await _clone_ticket(db, original, batch_options, user_id, company_id))

    logger.info(
        "ticket_batch_cloned",
        event_id=str(event_id),
        batch_no=batch_options.batchNo,
        cloned_count=len(cloned),
    )
    return [await find_one_by_id(db, ticket.id, company_id) for ticket in cloned]


async def _clone_ticket(
    db: AsyncSession,
    original: Ticket,
    options: TicketCloneOptions,
    user_id: UUID,
    company_id: UUID,
) -> Ticket:
    event_id = original.event_id
    if options.newEventId:
        event = await event_service.find_one_by_id(db, options.newEventId, company_id)
        event_id = event.id

    batch_no = options.batchNo or original.batch_no + 1
    factor = 1 + options.priceIncreasePercentage / Decimal(100)

    ticket = Ticket(
        user_id=user_id,
        company_id=company_id,
        event_id=event_id,
        parent_ticket_id=original.id,
        code=await generate_clone_code(db, original.code, batch_no, company_id),
        name=original.name,
        unit_value=_scale(original.unit_value, factor),
        price=_scale(original.price, factor),
        currency=original.currency,
        quantity=original.quantity,
        stock_total=options.newStock if options.newStock is not None else original.stock_total,
        stock_sold=0,
        type=original.type,
        day=original.day,
        category=original.category,
        cupom=original.cupom,
        sales_start_at=options.salesStartAt or original.sales_start_at,
        sales_end_at=options.salesEndAt or original.sales_end_at,
        batch_no=batch_no,
        batch_date=options.batchDate or original.batch_date,
        description=original.description,
        is_active=True,
    )
    db.add(ticket)
    await db.flush()

    logger.info(
        "ticket_cloned",
        ticket_id=str(ticket.id),
        parent_ticket_id=str(original.id),
        code=ticket.code,
        batch_no=batch_no,
    )
    return ticket


async def generate_clone_code(db: AsyncSession, code: str, batch_no: int, company_id: UUID) -> str:
    base_code = f"{code}-L{batch_no}"[:CODE_MAX_LENGTH]
    candidate = base_code
    counter = 1

    while await _code_exists(db, candidate, company_id):
        counter += 1
        suffix = f"-{counter}"
        candidate = base_code[: CODE_MAX_LENGTH - len(suffix)] + suffix

    return candidate


def _scale(amount: Decimal, factor: Decimal) -> Decimal:
    return (Decimal(amount) * factor).quantize(CENTS, rounding=ROUND_HALF_UP)


async def _code_exists(
    db: AsyncSession, code: str, company_id: UUID, exclude_id: Optional[UUID] = None
) -> bool:
    query = select(Ticket.id).where(Ticket.code == code, Ticket.company_id == company_id)
    if exclude_id is not None:
        query = query.where(Ticket.id != exclude_id)
    return (await db.execute(query.limit(1))).first() is not None


async def _validate_unique_code(
    db: AsyncSession, code: str, company_id: UUID, exclude_id: Optional[UUID] = None
) -> None:
    if await _code_exists(db, code, company_id, exclude_id):
        raise ValidationError(
            message="O código informado já está sendo utilizado nesta empresa.",
            action="Utilize outro código para realizar esta operação.",
        )
