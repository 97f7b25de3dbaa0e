"""
Company model: the tenant root. Every other table carries a company_id.
"""

from sqlalchemy import Column, String, Boolean, JSON, CheckConstraint

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

SUBSCRIPTION_PLANS = ("free", "premium", "enterprise")
SUBSCRIPTION_STATUSES = ("active", "suspended", "cancelled")


class Company(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "companies"

    name = Column(String(255), nullable=False)
    slug = Column(String(128), unique=True, nullable=False, index=True)
    cnpj = Column(String(14), unique=True, nullable=False)
    subscription_plan = Column(String(20), nullable=False, default="free")
    subscription_status = Column(String(20), nullable=False, default="active")
    settings = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "subscription_plan IN ('free', 'premium', 'enterprise')",
            name="check_company_subscription_plan",
        ),
        CheckConstraint(
            "subscription_status IN ('active', 'suspended', 'cancelled')",
            name="check_company_subscription_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, slug={self.slug})>"
