"""
Checkout service.

A checkout is an order intent: it snapshots the totals of a cart at the time
the customer starts paying. Once written it is never updated; the cart rows it
was computed from leave the draft state so the snapshot cannot drift.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.models.cart import CartItem, CART_STATUS_DRAFT, CART_STATUS_CHECKOUT
from app.models.checkout import Checkout
from app.models.user import User
from app.schemas.cart import CheckoutRequest
from app.services import cart_service
from app.core.errors import NotFoundError, ValidationError
from app.core.metrics import record_checkout
from app.core.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_STATUS_PENDING = "pending"


async def find_user_by_email(db: AsyncSession, email: str, company_id: UUID) -> Optional[User]:
    result = await db.execute(
        select(User)
        .where(
            func.lower(User.email) == email.lower(),
            User.company_id == company_id,
            User.status.is_(True),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def find_by_id(db: AsyncSession, checkout_id: UUID) -> Checkout:
    result = await db.execute(
        select(Checkout)
        .where(Checkout.id == checkout_id)
        .execution_options(populate_existing=True)
    )
    checkout = result.scalar_one_or_none()
    if not checkout:
        raise NotFoundError(
            message="Checkout não encontrado.",
            action="Verifique se o checkout existe.",
        )
    return checkout


async def find_by_session_token(db: AsyncSession, session_token: str) -> Checkout:
    """Latest checkout started for the cart token."""
    result = await db.execute(
        select(Checkout)
        .where(Checkout.session_token == session_token)
        .order_by(Checkout.created_at.desc())
        .limit(1)
    )
    checkout = result.scalar_one_or_none()
    if not checkout:
        raise NotFoundError(
            message="Checkout não encontrado.",
            action="Verifique se o sessionToken está correto.",
        )
    return checkout


async def create(db: AsyncSession, checkout_data: CheckoutRequest) -> Checkout:
    token = checkout_data.sessionToken

    items = await cart_service.find_by_session_token(db, token)
    if not items:
        raise NotFoundError(
            message="Carrinho não encontrado ou está vazio.",
            action="Adicione itens ao carrinho antes de iniciar o checkout.",
        )

    if checkout_data.shipping_method:
        await cart_service.update_shipping_by_session_token(db, token, checkout_data.shipping_method)

    totals = await cart_service.calculate_totals_by_session_token(db, token)
    if len(totals) != 1:
        raise ValidationError(
            message="O carrinho possui itens em moedas diferentes.",
            action="Mantenha no carrinho apenas itens na mesma moeda.",
        )
    total = totals[0]

    company_id = items[0].company_id
    event_id = items[0].event_id
    user = await find_user_by_email(db, checkout_data.email, company_id)

    discount_total = Decimal("0.00")
    checkout = Checkout(
        session_token=token,
        company_id=company_id,
        event_id=event_id,
        user_id=user.id if user else None,
        client_email=checkout_data.email,
        payment_method=checkout_data.payment_method,
        coupon_code=None,
        coupon_discount=Decimal("0.00"),
        total_amount=total["total_amount"],
        shipping_total=total["shipping_total"],
        discount_total=discount_total,
        grand_total=total["grand_total"] - discount_total,
        currency=total["currency"],
        status=CHECKOUT_STATUS_PENDING,
    )
    db.add(checkout)
    await db.flush()

    await db.execute(
        update(CartItem)
        .where(CartItem.session_token == token, CartItem.status == CART_STATUS_DRAFT)
        .values(status=CART_STATUS_CHECKOUT, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )

    record_checkout()
    logger.info(
        "checkout_created",
        checkout_id=str(checkout.id),
        event_id=str(event_id),
        grand_total=str(checkout.grand_total),
        currency=checkout.currency,
        known_user=user is not None,
    )
    return await find_by_id(db, checkout.id)
