"""
Pydantic schemas for company (tenant) request/response validation.
"""

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

SubscriptionPlan = Literal["free", "premium", "enterprise"]
SubscriptionStatus = Literal["active", "suspended", "cancelled"]


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=128, pattern=r"^[a-zA-Z0-9-]+$")
    cnpj: str = Field(..., min_length=14, max_length=14, pattern=r"^\d{14}$")
    subscription_plan: SubscriptionPlan = "free"
    subscription_status: SubscriptionStatus = "active"
    settings: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=128, pattern=r"^[a-zA-Z0-9-]+$")
    cnpj: Optional[str] = Field(None, min_length=14, max_length=14, pattern=r"^\d{14}$")
    subscription_plan: Optional[SubscriptionPlan] = None
    subscription_status: Optional[SubscriptionStatus] = None
    settings: Optional[dict[str, Any]] = None


class CompanyRecord(BaseModel):
    """Updatable columns of a company, as one immutable value."""

    name: str
    slug: str
    cnpj: str
    subscription_plan: SubscriptionPlan
    subscription_status: SubscriptionStatus
    settings: dict[str, Any]

    model_config = {"from_attributes": True, "frozen": True}


class CompanyResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    cnpj: str
    subscription_plan: str
    subscription_status: str
    settings: dict[str, Any]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
