"""
Pydantic schemas for the storefront cart and checkout.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import Money

ShippingMethod = Literal["digital", "home"]


class CartItemInput(BaseModel):
    ticket_id: UUID
    price: Decimal = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class CartReplaceRequest(BaseModel):
    sessionToken: str = Field(..., min_length=1, max_length=255)
    company_id: UUID
    event_id: UUID
    items: list[CartItemInput] = Field(..., min_length=1)


class CartQuantityUpdate(BaseModel):
    sessionToken: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=1)


class ShippingRequest(BaseModel):
    sessionToken: str = Field(..., min_length=1, max_length=255)
    shipping_method: ShippingMethod


class CartItemSummary(BaseModel):
    id: UUID
    ticket_id: UUID
    price: Money
    quantity: int
    currency: str

    model_config = {"from_attributes": True}


class CartTotals(BaseModel):
    total_items: int
    total_quantity: int
    total_amount: Money
    shipping_total: Money
    grand_total: Money
    currency: str


class ShippingOption(BaseModel):
    method: ShippingMethod
    price: Money
    description: str


class CartResponse(BaseModel):
    message: str
    sessionToken: str
    company_id: Optional[UUID]
    event_id: Optional[UUID]
    items: list[CartItemSummary]
    totals: list[CartTotals]
    shipping: Optional[ShippingOption] = None


class CheckoutRequest(BaseModel):
    sessionToken: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    payment_method: Optional[str] = Field(None, max_length=50)
    shipping_method: Optional[ShippingMethod] = None


class CheckoutTotals(BaseModel):
    total_amount: Money
    shipping_total: Money
    discount_total: Money
    grand_total: Money
    currency: str


class CheckoutCreatedResponse(BaseModel):
    message: str
    checkout_id: UUID
    sessionToken: str
    client_email: str
    user_id: Optional[UUID]
    company_id: UUID
    event_id: UUID
    totals: CheckoutTotals
    status: str


class CheckoutResponse(BaseModel):
    id: UUID
    session_token: str
    company_id: UUID
    event_id: UUID
    user_id: Optional[UUID]
    client_email: str
    payment_method: Optional[str]
    coupon_code: Optional[str]
    coupon_discount: Money
    total_amount: Money
    shipping_total: Money
    discount_total: Money
    grand_total: Money
    currency: str
    status: str
    company_name: str
    event_name: str
    event_slug: str
    username: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
