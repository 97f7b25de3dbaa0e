"""
First-run bootstrap: a default company and its admin user.

Safe to call repeatedly; existing records are returned untouched.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from app.models.user import User
from app.core.security import hash_password
from app.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_COMPANY = {
    "name": "Empresa Padrão",
    "slug": "empresa-padrao",
    "cnpj": "00000000000100",
    "subscription_plan": "enterprise",
    "subscription_status": "active",
}

DEFAULT_ADMIN = {
    "username": "admin",
    "email": "admin@empresapadrao.com",
    "role": "admin",
}
DEFAULT_ADMIN_PASSWORD = "mudar123"


async def ensure_default_tenant(db: AsyncSession) -> tuple[Company, User]:
    result = await db.execute(select(Company).where(Company.slug == DEFAULT_COMPANY["slug"]))
    company = result.scalar_one_or_none()
    if company is None:
        company = Company(**DEFAULT_COMPANY, settings={}, is_active=True)
        db.add(company)
        await db.flush()
        logger.info("default_company_created", company_id=str(company.id))

    result = await db.execute(select(User).where(User.email == DEFAULT_ADMIN["email"]))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(
            **DEFAULT_ADMIN,
            company_id=company.id,
            password=hash_password(DEFAULT_ADMIN_PASSWORD),
        )
        db.add(user)
        await db.flush()
        logger.info("default_admin_created", user_id=str(user.id))

    return company, user
