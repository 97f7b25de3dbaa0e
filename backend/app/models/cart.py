"""
Cart item model.

Rows are keyed by a client-supplied session token, not by the login session.
All rows of one token share company_id and event_id; the service layer keeps
them immutable after the first write.
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, ForeignKey, Uuid, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

CART_STATUS_DRAFT = "draft"
CART_STATUS_CHECKOUT = "checkout"


class CartItem(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "carts"

    session_token = Column(String(255), nullable=False)
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id"), nullable=False)
    ticket_id = Column(Uuid(as_uuid=True), ForeignKey("tickets.id"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="BRL")
    quantity = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=CART_STATUS_DRAFT)
    shipping_method = Column(String(20), nullable=True)
    shipping_price = Column(Numeric(10, 2), nullable=False, default=0)

    ticket = relationship("Ticket", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_cart_quantity_positive"),
        Index("ix_carts_session_token_status", "session_token", "status"),
    )

    def __repr__(self) -> str:
        return f"<CartItem(id={self.id}, ticket={self.ticket_id}, qty={self.quantity}, status={self.status})>"
