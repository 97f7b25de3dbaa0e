"""
Pydantic schemas for client request/response validation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=30)
    cpfcnpj: str = Field(..., min_length=11, max_length=14, pattern=r"^\d+$")
    premium: bool = True
    address_id: Optional[UUID] = None


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=30)
    cpfcnpj: Optional[str] = Field(None, min_length=11, max_length=14, pattern=r"^\d+$")
    premium: Optional[bool] = None
    address_id: Optional[UUID] = None


class ClientRecord(BaseModel):
    """Updatable columns of a client, as one immutable value."""

    name: str
    cpfcnpj: str
    premium: bool
    address_id: Optional[UUID]

    model_config = {"from_attributes": True, "frozen": True}


class ClientResponse(BaseModel):
    id: UUID
    user_id: UUID
    company_id: UUID
    address_id: Optional[UUID]
    name: str
    cpfcnpj: str
    premium: bool
    created_by_username: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
