"""
Pydantic schemas for ticket-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import Money


class TicketCreate(BaseModel):
    event_id: UUID
    parent_ticket_id: Optional[UUID] = None
    code: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=128)
    unit_value: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field("BRL", min_length=3, max_length=3)
    quantity: int = Field(..., gt=0)
    stock_total: int = Field(..., ge=0)
    stock_sold: int = Field(0, ge=0)
    type: str = Field(..., min_length=1, max_length=128)
    day: Optional[str] = Field(None, max_length=128)
    category: str = Field(..., min_length=1, max_length=128)
    cupom: Optional[str] = Field(None, max_length=128)
    sales_start_at: datetime
    sales_end_at: Optional[datetime] = None
    batch_no: int = Field(1, ge=1)
    batch_date: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=500)
    is_active: bool = True


class TicketUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    code: Optional[str] = Field(None, min_length=1, max_length=128)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_total: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1, max_length=128)
    sales_start_at: Optional[datetime] = None
    sales_end_at: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class TicketRecord(BaseModel):
    """Updatable columns of a ticket, as one immutable value."""

    name: str
    code: str
    price: Decimal
    stock_total: int
    category: str
    sales_start_at: datetime
    sales_end_at: Optional[datetime]
    description: Optional[str]
    is_active: bool

    model_config = {"from_attributes": True, "frozen": True}


class TicketFilters(BaseModel):
    event_id: Optional[UUID] = None
    is_active: Optional[bool] = None
    category: Optional[str] = None


class TicketCloneOptions(BaseModel):
    newEventId: Optional[UUID] = None
    batchNo: Optional[int] = Field(None, ge=1)
    batchDate: Optional[datetime] = None
    newStock: Optional[int] = Field(None, ge=0)
    priceIncreasePercentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    salesStartAt: Optional[datetime] = None
    salesEndAt: Optional[datetime] = None


class TicketBatchCloneRequest(TicketCloneOptions):
    eventId: Optional[UUID] = None


class StockUpdateRequest(BaseModel):
    quantity: int = Field(..., gt=0)


class TicketResponse(BaseModel):
    id: UUID
    user_id: UUID
    company_id: UUID
    event_id: UUID
    parent_ticket_id: Optional[UUID]
    code: str
    name: str
    unit_value: Money
    price: Money
    currency: str
    quantity: int
    stock_total: int
    stock_sold: int
    stock_available: int
    type: str
    day: Optional[str]
    category: str
    cupom: Optional[str]
    sales_start_at: datetime
    sales_end_at: Optional[datetime]
    batch_no: int
    batch_date: Optional[datetime]
    description: Optional[str]
    is_active: bool
    event_name: str
    event_slug: str
    created_by_username: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TicketBatchCloneResponse(BaseModel):
    message: str
    clonedCount: int
    tickets: list[TicketResponse]
