"""
Login session: an opaque token bound to one user inside one company.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class UserSession(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "sessions"

    token = Column(String(96), unique=True, nullable=False, index=True)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", lazy="selectin")
    company = relationship("Company", lazy="selectin")

    def __repr__(self) -> str:
        return f"<UserSession(id={self.id}, user={self.user_id}, expires_at={self.expires_at})>"
