"""
Event model.

Key design decisions:
- Slug is unique per company, compared case-insensitively by the service layer
- `ticket_types_count` is not a column; finders attach it from a COUNT subquery
- Index on (company_id, start_date) backs the default listing order
"""

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, Time, ForeignKey, Uuid, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

VISIBILITY_CODES = {
    "public": 1,
    "private": 2,
    "draft": 3,
    "hidden": 4,
}

SLUG_MAX_LENGTH = 128


class Event(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False)
    event_name = Column(String(128), nullable=False)
    slug = Column(String(SLUG_MAX_LENGTH), nullable=False)
    free = Column(Boolean, nullable=True)
    start_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_date = Column(Date, nullable=True)
    end_time = Column(Time, nullable=True)
    integration = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    code = Column(String(30), nullable=True)
    nomenclature = Column(String(30), nullable=True)
    producer = Column(String(255), nullable=True)
    own = Column(Boolean, nullable=True)
    visibility = Column(Integer, nullable=True)
    avatar = Column(String(240), nullable=True)
    cover = Column(String(240), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    fee = Column(Boolean, nullable=True)
    subject = Column(String(255), nullable=True)
    category = Column(String(255), nullable=True)
    zip_code = Column(String(20), nullable=True)
    place = Column(String(255), nullable=True)
    address = Column(String(128), nullable=True)
    number = Column(String(50), nullable=True)
    neighborhood = Column(String(50), nullable=True)
    city = Column(String(50), nullable=True)
    state = Column(String(5), nullable=True)

    creator = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("slug", "company_id", name="uq_events_slug_company"),
        Index("ix_events_company_start_date", "company_id", "start_date"),
    )

    @property
    def created_by_username(self) -> str:
        return self.creator.username

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug}, company={self.company_id})>"
