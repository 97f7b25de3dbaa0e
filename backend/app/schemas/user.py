"""
Pydantic schemas for user-related request/response validation.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

Role = Literal["admin", "manager", "operator", "viewer"]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    role: Role = "admin"


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9]+$")
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    role: Optional[Role] = None


class UserRecord(BaseModel):
    """Updatable columns of a user, as one immutable value."""

    username: str
    email: str
    password: str
    role: Role

    model_config = {"from_attributes": True, "frozen": True}


class UserResponse(BaseModel):
    id: UUID
    company_id: UUID
    username: str
    email: str
    role: str
    status: bool
    company_name: str
    company_slug: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    """Either email + password, or username + company_slug + password."""

    email: Optional[str] = None
    username: Optional[str] = None
    company_slug: Optional[str] = None
    password: str

