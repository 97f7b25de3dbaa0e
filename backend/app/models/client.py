"""
Client model: a tenant's customer record, identified by CPF/CNPJ.
"""

from sqlalchemy import Column, String, Boolean, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Client(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "clients"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id"), nullable=False, index=True)
    address_id = Column(Uuid(as_uuid=True), nullable=True)
    name = Column(String(30), nullable=False)
    cpfcnpj = Column(String(14), nullable=False)
    premium = Column(Boolean, nullable=False, default=True)

    creator = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("cpfcnpj", "company_id", name="uq_clients_cpfcnpj_company"),
    )

    @property
    def created_by_username(self) -> str:
        return self.creator.username

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, cpfcnpj={self.cpfcnpj})>"
