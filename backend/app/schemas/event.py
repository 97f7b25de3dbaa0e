"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import date, datetime, time
from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

Visibility = Literal["public", "private", "draft", "hidden"]


class EventCreate(BaseModel):
    event_name: str = Field(..., min_length=1, max_length=128)
    slug: Optional[str] = Field(None, min_length=1, max_length=128, pattern=r"^[a-zA-Z0-9-]+$")
    free: bool = False
    start_date: Optional[date] = None
    start_time: Optional[time] = None
    end_date: Optional[date] = None
    end_time: Optional[time] = None
    integration: Optional[Union[int, str]] = None
    description: Optional[str] = None
    code: Optional[str] = Field(None, max_length=30)
    nomenclature: Optional[str] = Field(None, max_length=30)
    producer: Optional[str] = Field(None, max_length=255)
    own: Optional[bool] = None
    visibility: Optional[Visibility] = None
    avatar: Optional[str] = Field(None, max_length=240)
    cover: Optional[str] = Field(None, max_length=240)
    active: bool = True
    fee: Optional[bool] = None
    subject: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=255)
    zip_code: Optional[str] = Field(None, max_length=20)
    place: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=128)
    number: Optional[str] = Field(None, max_length=50)
    neighborhood: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, max_length=50)
    state: Optional[str] = Field(None, max_length=5)


class EventUpdate(BaseModel):
    event_name: Optional[str] = Field(None, min_length=1, max_length=128)
    slug: Optional[str] = Field(None, min_length=1, max_length=128, pattern=r"^[a-zA-Z0-9-]+$")
    free: Optional[bool] = None
    start_date: Optional[date] = None
    start_time: Optional[time] = None
    end_date: Optional[date] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=255)
    place: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=128)
    city: Optional[str] = Field(None, max_length=50)
    state: Optional[str] = Field(None, max_length=5)
    active: Optional[bool] = None


class EventRecord(BaseModel):
    """Updatable columns of an event, as one immutable value."""

    event_name: str
    slug: str
    free: Optional[bool]
    start_date: Optional[date]
    start_time: Optional[time]
    end_date: Optional[date]
    end_time: Optional[time]
    description: Optional[str]
    category: Optional[str]
    place: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    active: bool

    model_config = {"from_attributes": True, "frozen": True}


class EventFilters(BaseModel):
    active: Optional[bool] = None
    start_date: Optional[date] = None
    category: Optional[str] = None

    def cache_key(self) -> str:
        return f"active={self.active}&start={self.start_date}&category={self.category}"


class EventResponse(BaseModel):
    id: UUID
    user_id: UUID
    company_id: UUID
    event_name: str
    slug: str
    free: Optional[bool]
    start_date: Optional[date]
    start_time: Optional[time]
    end_date: Optional[date]
    end_time: Optional[time]
    integration: Optional[int]
    description: Optional[str]
    code: Optional[str]
    nomenclature: Optional[str]
    producer: Optional[str]
    own: Optional[bool]
    visibility: Optional[int]
    avatar: Optional[str]
    cover: Optional[str]
    active: bool
    fee: Optional[bool]
    subject: Optional[str]
    category: Optional[str]
    zip_code: Optional[str]
    place: Optional[str]
    address: Optional[str]
    number: Optional[str]
    neighborhood: Optional[str]
    city: Optional[str]
    state: Optional[str]
    created_by_username: str
    ticket_types_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
