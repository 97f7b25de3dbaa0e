"""
User model with secure password storage.

Username is unique per company, email is unique across all tenants.
"""

from sqlalchemy import Column, String, Boolean, ForeignKey, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

# Higher level grants everything below it
ROLE_LEVELS = {
    "viewer": 1,
    "operator": 2,
    "manager": 3,
    "admin": 4,
}


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False, index=True)
    username = Column(String(30), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    password = Column(String(60), nullable=False)
    role = Column(String(20), nullable=False, default="admin")
    status = Column(Boolean, nullable=False, default=True)

    company = relationship("Company", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("username", "company_id", name="uq_users_username_company"),
        CheckConstraint(
            "role IN ('admin', 'manager', 'operator', 'viewer')",
            name="check_user_role",
        ),
    )

    @property
    def company_name(self) -> str:
        return self.company.name

    @property
    def company_slug(self) -> str:
        return self.company.slug

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
