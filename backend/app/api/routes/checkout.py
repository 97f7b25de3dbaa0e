"""
Checkout endpoints. Like carts, keyed by the storefront sessionToken.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.cart import CheckoutRequest, CheckoutCreatedResponse, CheckoutTotals, CheckoutResponse
from app.services import checkout_service

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.post("", response_model=CheckoutCreatedResponse, status_code=status.HTTP_201_CREATED)
async def start_checkout(
    checkout_data: CheckoutRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Snapshot the cart totals into a pending checkout.
    The buyer is linked to an existing active user of the company with the same email, if any.
    """
    checkout = await checkout_service.create(db, checkout_data)
    return CheckoutCreatedResponse(
        message="Checkout iniciado com sucesso.",
        checkout_id=checkout.id,
        sessionToken=checkout.session_token,
        client_email=checkout.client_email,
        user_id=checkout.user_id,
        company_id=checkout.company_id,
        event_id=checkout.event_id,
        totals=CheckoutTotals(
            total_amount=checkout.total_amount,
            shipping_total=checkout.shipping_total,
            discount_total=checkout.discount_total,
            grand_total=checkout.grand_total,
            currency=checkout.currency,
        ),
        status=checkout.status,
    )


@router.get("", response_model=CheckoutResponse)
async def get_checkout(
    session_token: str = Query(..., alias="sessionToken", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    return await checkout_service.find_by_session_token(db, session_token)
