"""
Ticket model: a ticket type (lot) sold for an event, not an admission.

Key design decisions:
- `stock_sold` only moves through a conditional UPDATE guarded by available stock
- CHECK constraints are the final safety net (stock_sold never exceeds stock_total)
- `parent_ticket_id` links a cloned lot back to the ticket it was derived from
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, Uuid,
    UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

CODE_MAX_LENGTH = 128


class Ticket(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "tickets"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id"), nullable=False, index=True)
    parent_ticket_id = Column(Uuid(as_uuid=True), ForeignKey("tickets.id"), nullable=True)
    code = Column(String(CODE_MAX_LENGTH), nullable=False)
    name = Column(String(128), nullable=False)
    unit_value = Column(Numeric(10, 2), nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="BRL")
    quantity = Column(Integer, nullable=False)
    stock_total = Column(Integer, nullable=False)
    stock_sold = Column(Integer, nullable=False, default=0)
    type = Column(String(128), nullable=False)
    day = Column(String(128), nullable=True)
    category = Column(String(128), nullable=False)
    cupom = Column(String(128), nullable=True)
    sales_start_at = Column(DateTime(timezone=True), nullable=False)
    sales_end_at = Column(DateTime(timezone=True), nullable=True)
    batch_no = Column(Integer, nullable=False, default=1)
    batch_date = Column(DateTime(timezone=True), nullable=True)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    event = relationship("Event", lazy="selectin")
    creator = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("code", "company_id", name="uq_tickets_code_company"),
        CheckConstraint("stock_sold >= 0", name="check_ticket_stock_sold_non_negative"),
        CheckConstraint("stock_sold <= stock_total", name="check_ticket_sold_lte_total"),
        Index("ix_tickets_event_batch", "event_id", "batch_no"),
    )

    @property
    def stock_available(self) -> int:
        return self.stock_total - self.stock_sold

    @property
    def event_name(self) -> str:
        return self.event.event_name

    @property
    def event_slug(self) -> str:
        return self.event.slug

    @property
    def created_by_username(self) -> str:
        return self.creator.username

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, code={self.code}, sold={self.stock_sold}/{self.stock_total})>"
