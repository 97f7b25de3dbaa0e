"""
Storefront cart endpoints. Not authenticated: a cart is identified by the
client-generated sessionToken.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.cart import (
    CartReplaceRequest,
    CartQuantityUpdate,
    ShippingRequest,
    CartItemSummary,
    CartResponse,
)
from app.services import cart_service

router = APIRouter(prefix="/carts", tags=["Carts"])


@router.get("", response_model=CartResponse)
async def get_cart(
    session_token: str = Query(..., alias="sessionToken", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    items = await cart_service.find_by_session_token(db, session_token)
    message = "Carrinho recuperado com sucesso." if items else "Carrinho vazio."
    return await cart_service.get_summary(db, session_token, message)


@router.post("", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def replace_cart(
    cart_data: CartReplaceRequest,
    db: AsyncSession = Depends(get_db),
):
    """Replace the cart's draft items with the submitted ones."""
    await cart_service.replace(db, cart_data)
    return await cart_service.get_summary(db, cart_data.sessionToken, "Carrinho atualizado com sucesso.")


@router.post("/shipping", response_model=CartResponse)
async def select_shipping(
    shipping_data: ShippingRequest,
    db: AsyncSession = Depends(get_db),
):
    option = await cart_service.update_shipping_by_session_token(
        db, shipping_data.sessionToken, shipping_data.shipping_method
    )
    return await cart_service.get_summary(
        db,
        shipping_data.sessionToken,
        "Forma de entrega atualizada com sucesso.",
        shipping=option,
    )


@router.patch("/{cart_id}", response_model=CartItemSummary)
async def update_cart_item(
    cart_id: UUID,
    quantity_data: CartQuantityUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await cart_service.update_quantity(
        db, cart_id, quantity_data.quantity, quantity_data.sessionToken
    )


@router.delete("/{cart_id}", response_model=CartItemSummary)
async def delete_cart_item(
    cart_id: UUID,
    session_token: str = Query(..., alias="sessionToken", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    return await cart_service.delete_by_id(db, cart_id, session_token)
