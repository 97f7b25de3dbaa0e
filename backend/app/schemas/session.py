"""
Pydantic schemas for sessions and the authenticated request context.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ContextUser(BaseModel):
    id: UUID
    username: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class ContextCompany(BaseModel):
    id: UUID
    name: str
    slug: str
    subscription_plan: str
    subscription_status: str

    model_config = {"from_attributes": True}


class ContextSession(BaseModel):
    id: UUID
    token: str
    expires_at: datetime

    model_config = {"from_attributes": True}


class RequestContext(BaseModel):
    user: ContextUser
    company: ContextCompany
    session: ContextSession


class SessionUser(BaseModel):
    id: UUID
    username: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class SessionCompany(BaseModel):
    id: UUID
    name: str
    slug: str

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    id: UUID
    token: str
    user_id: UUID
    company_id: UUID
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    user: SessionUser
    company: SessionCompany

    model_config = {"from_attributes": True}


class CurrentUserResponse(ContextUser):
    company: ContextCompany
