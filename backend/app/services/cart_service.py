"""
Storefront cart service.

Carts are keyed by a client-supplied session token, not by a login session,
and are never authenticated. The first write for a token fixes its
company_id and event_id; later writes must repeat the same pair.

Stock is only read-checked here. Nothing is reserved, so two carts can both
pass validation for the last units of a ticket; stock is actually taken by
ticket_service.update_stock when a sale is registered.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.models.cart import CartItem, CART_STATUS_DRAFT
from app.models.ticket import Ticket
from app.schemas.cart import CartReplaceRequest, CartResponse, CartItemSummary, CartTotals, ShippingOption
from app.core.config import get_settings
from app.core.errors import NotFoundError, ValidationError
from app.core.metrics import record_cart_write
from app.core.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def shipping_options() -> dict[str, dict]:
    return {
        "digital": {
            "method": "digital",
            "price": Decimal("0.00"),
            "description": "Entrega digital - Receba por email",
        },
        "home": {
            "method": "home",
            "price": get_settings().HOME_SHIPPING_PRICE,
            "description": "Entrega em casa - Taxa de R$ 25,00",
        },
    }


async def find_one_by_id(db: AsyncSession, cart_id: UUID, session_token: str) -> CartItem:
    result = await db.execute(
        select(CartItem)
        .where(CartItem.id == cart_id, CartItem.session_token == session_token)
        .execution_options(populate_existing=True)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise NotFoundError(
            message="O carrinho informado não foi encontrado no sistema.",
            action="Verifique se o ID está correto.",
        )
    return item


async def find_by_session_token(db: AsyncSession, session_token: str) -> list[CartItem]:
    result = await db.execute(
        select(CartItem)
        .where(CartItem.session_token == session_token, CartItem.status == CART_STATUS_DRAFT)
        .order_by(CartItem.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def replace(db: AsyncSession, cart_data: CartReplaceRequest) -> list[CartItem]:
    """
    Replace every draft item of the token with `cart_data.items`.
    A previously selected shipping method carries over to the new items.
    """
    token = cart_data.sessionToken
    existing = await find_by_session_token(db, token)

    shipping_method = None
    shipping_price = Decimal("0")
    if existing:
        first = existing[0]
        if first.company_id != cart_data.company_id or first.event_id != cart_data.event_id:
            record_cart_write(success=False)
            raise ValidationError(
                message="Não é possível alterar company_id ou event_id de um carrinho existente.",
                action="Use um novo sessionToken ou mantenha os mesmos company_id e event_id.",
            )
        shipping_method = first.shipping_method
        shipping_price = first.shipping_price
        await clear_drafts_by_session_token(db, token)

    try:
        for item in cart_data.items:
            ticket = await validate_ticket_availability(
                db, item.ticket_id, item.quantity, cart_data.company_id
            )
            if ticket.event_id != cart_data.event_id:
                raise ValidationError(
                    message="Um dos ingressos não pertence ao evento informado.",
                    action="Verifique se todos os ingressos pertencem ao evento correto.",
                )
            if ticket.price != item.price:
                raise ValidationError(
                    message=f"O preço informado para o ingresso {ticket.name} não confere com o preço atual.",
                    action="Atualize a página e tente novamente.",
                )

            db.add(
                CartItem(
                    session_token=token,
                    company_id=cart_data.company_id,
                    event_id=cart_data.event_id,
                    ticket_id=item.ticket_id,
                    price=item.price,
                    currency=item.currency or get_settings().DEFAULT_CURRENCY,
                    quantity=item.quantity,
                    status=CART_STATUS_DRAFT,
                    shipping_method=shipping_method,
                    shipping_price=shipping_price,
                )
            )
    except (NotFoundError, ValidationError):
        record_cart_write(success=False)
        raise

    await db.flush()
    record_cart_write(success=True)
    logger.info("cart_replaced", items=len(cart_data.items), event_id=str(cart_data.event_id))
    return await find_by_session_token(db, token)


async def update_quantity(db: AsyncSession, cart_id: UUID, quantity: int, session_token: str) -> CartItem:
    item = await find_one_by_id(db, cart_id, session_token)
    if item.status != CART_STATUS_DRAFT:
        raise NotFoundError(
            message="Carrinho não encontrado ou não pode ser atualizado.",
            action="Verifique se o carrinho existe e está em rascunho.",
        )

    await validate_ticket_availability(db, item.ticket_id, quantity, item.company_id)

    item.quantity = quantity
    await db.flush()

    logger.info("cart_item_quantity_updated", cart_id=str(cart_id), quantity=quantity)
    return await find_one_by_id(db, cart_id, session_token)


async def update_status(db: AsyncSession, cart_id: UUID, status: str, session_token: str) -> CartItem:
    item = await find_one_by_id(db, cart_id, session_token)
    item.status = status
    await db.flush()
    return await find_one_by_id(db, cart_id, session_token)


async def delete_by_id(db: AsyncSession, cart_id: UUID, session_token: str) -> CartItem:
    item = await find_one_by_id(db, cart_id, session_token)
    await db.execute(
        delete(CartItem).where(CartItem.id == item.id, CartItem.session_token == session_token)
    )
    logger.info("cart_item_deleted", cart_id=str(cart_id))
    return item


async def clear_drafts_by_session_token(db: AsyncSession, session_token: str) -> int:
    result = await db.execute(
        delete(CartItem).where(
            CartItem.session_token == session_token,
            CartItem.status == CART_STATUS_DRAFT,
        )
    )
    return result.rowcount


async def update_shipping_by_session_token(db: AsyncSession, session_token: str, method: str) -> dict:
    option = shipping_options().get(method)
    if option is None:
        raise ValidationError(
            message="Método de entrega inválido.",
            action="Escolha entre 'digital' (grátis) ou 'home' (R$ 25,00).",
        )

    result = await db.execute(
        update(CartItem)
        .where(CartItem.session_token == session_token, CartItem.status == CART_STATUS_DRAFT)
        .values(shipping_method=option["method"], shipping_price=option["price"], updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError(
            message="Carrinho não encontrado ou está vazio.",
            action="Adicione itens ao carrinho antes de escolher a entrega.",
        )

    logger.info("cart_shipping_selected", method=method, items=result.rowcount)
    return option


async def calculate_totals_by_session_token(db: AsyncSession, session_token: str) -> list[dict]:
    """
    Totals of the token's draft items, one entry per currency.
    Shipping is charged once per cart, not per item.
    """
    result = await db.execute(
        select(
            CartItem.currency,
            func.count(CartItem.id),
            func.sum(CartItem.quantity),
            func.sum(CartItem.price * CartItem.quantity),
            func.max(CartItem.shipping_price),
        )
        .where(CartItem.session_token == session_token, CartItem.status == CART_STATUS_DRAFT)
        .group_by(CartItem.currency)
        .order_by(CartItem.currency)
    )

    totals = []
    for currency, total_items, total_quantity, total_amount, shipping_total in result.all():
        total_amount = Decimal(total_amount or 0).quantize(CENTS)
        shipping_total = Decimal(shipping_total or 0).quantize(CENTS)
        totals.append(
            {
                "total_items": int(total_items),
                "total_quantity": int(total_quantity or 0),
                "total_amount": total_amount,
                "shipping_total": shipping_total,
                "grand_total": total_amount + shipping_total,
                "currency": currency,
            }
        )
    return totals


async def get_summary(
    db: AsyncSession,
    session_token: str,
    message: str,
    shipping: Optional[dict] = None,
) -> CartResponse:
    items = await find_by_session_token(db, session_token)
    totals = await calculate_totals_by_session_token(db, session_token)

    return CartResponse(
        message=message,
        sessionToken=session_token,
        company_id=items[0].company_id if items else None,
        event_id=items[0].event_id if items else None,
        items=[CartItemSummary.model_validate(item) for item in items],
        totals=[CartTotals(**total) for total in totals],
        shipping=ShippingOption(**shipping) if shipping else None,
    )


async def validate_ticket_availability(
    db: AsyncSession, ticket_id: UUID, quantity: int, company_id: UUID
) -> Ticket:
    result = await db.execute(
        select(Ticket)
        .where(Ticket.id == ticket_id, Ticket.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    ticket = result.scalar_one_or_none()
    if not ticket:
        raise NotFoundError(
            message="O ingresso informado não foi encontrado.",
            action="Verifique se o ingresso existe.",
        )

    if not ticket.is_active:
        raise ValidationError(
            message="Este ingresso não está mais disponível para venda.",
            action="Escolha outro ingresso disponível.",
        )

    if ticket.stock_available < quantity:
        raise ValidationError(
            message=(
                f"Estoque insuficiente. Disponível: {ticket.stock_available}, "
                f"Solicitado: {quantity}."
            ),
            action=f"Reduza a quantidade para no máximo {ticket.stock_available} ingressos.",
        )

    return ticket
