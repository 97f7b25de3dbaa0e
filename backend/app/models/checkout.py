"""
Checkout model: an immutable snapshot of a cart's totals at checkout time.
"""

from sqlalchemy import Column, String, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Checkout(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "checkout"

    session_token = Column(String(255), nullable=False, index=True)
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    client_email = Column(String(254), nullable=False)
    payment_method = Column(String(50), nullable=True)
    coupon_code = Column(String(128), nullable=True)
    coupon_discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    shipping_total = Column(Numeric(10, 2), nullable=False, default=0)
    discount_total = Column(Numeric(10, 2), nullable=False, default=0)
    grand_total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="BRL")
    status = Column(String(20), nullable=False, default="pending")

    company = relationship("Company", lazy="selectin")
    event = relationship("Event", lazy="selectin")
    user = relationship("User", lazy="selectin")

    @property
    def company_name(self) -> str:
        return self.company.name

    @property
    def event_name(self) -> str:
        return self.event.event_name

    @property
    def event_slug(self) -> str:
        return self.event.slug

    @property
    def username(self):
        return self.user.username if self.user else None

    def __repr__(self) -> str:
        return f"<Checkout(id={self.id}, grand_total={self.grand_total} {self.currency})>"
