"""
Company (tenant root) service. Lookups here are not company-scoped: the
company is the scope.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from app.schemas.company import CompanyCreate, CompanyUpdate, CompanyRecord
from app.services.patching import apply_patch, write_record, changed
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger

logger = get_logger(__name__)


async def find_one_by_id(db: AsyncSession, company_id: UUID) -> Company:
    result = await db.execute(
        select(Company)
        .where(Company.id == company_id)
        .execution_options(populate_existing=True)
    )
    company = result.scalar_one_or_none()
    if not company:
        raise NotFoundError(
            message="A empresa informada não foi encontrada no sistema.",
            action="Verifique se o ID está digitado corretamente.",
        )
    return company


async def find_one_by_slug(db: AsyncSession, slug: str) -> Company:
    result = await db.execute(select(Company).where(func.lower(Company.slug) == slug.lower()))
    company = result.scalar_one_or_none()
    if not company:
        raise NotFoundError(
            message="A empresa informada não foi encontrada no sistema.",
            action="Verifique se o slug está digitado corretamente.",
        )
    return company


async def find_one_by_cnpj(db: AsyncSession, cnpj: str) -> Company:
    result = await db.execute(select(Company).where(Company.cnpj == cnpj))
    company = result.scalar_one_or_none()
    if not company:
        raise NotFoundError(
            message="A empresa informada não foi encontrada no sistema.",
            action="Verifique se o CNPJ está digitado corretamente.",
        )
    return company


async def create(db: AsyncSession, company_data: CompanyCreate) -> Company:
    await _validate_unique_slug(db, company_data.slug)
    await _validate_unique_cnpj(db, company_data.cnpj)

    company = Company(**company_data.model_dump())
    db.add(company)
    await db.flush()

    logger.info("company_created", company_id=str(company.id), slug=company.slug)
    return await find_one_by_id(db, company.id)


async def update(db: AsyncSession, company_id: UUID, company_data: CompanyUpdate) -> Company:
    company = await find_one_by_id(db, company_id)

    if changed(company_data, "slug", company.slug):
        await _validate_unique_slug(db, company_data.slug, exclude_id=company.id)
    if changed(company_data, "cnpj", company.cnpj):
        await _validate_unique_cnpj(db, company_data.cnpj, exclude_id=company.id)

    record = apply_patch(CompanyRecord, company, company_data)
    write_record(company, record)
    await db.flush()

    logger.info("company_updated", company_id=str(company.id))
    return await find_one_by_id(db, company.id)


async def _validate_unique_slug(db: AsyncSession, slug: str, exclude_id: Optional[UUID] = None) -> None:
    query = select(Company.id).where(func.lower(Company.slug) == slug.lower())
    if exclude_id is not None:
        query = query.where(Company.id != exclude_id)
    if (await db.execute(query)).first():
        raise ValidationError(
            message="O slug informado já está sendo utilizado.",
            action="Utilize outro slug para realizar esta operação.",
        )


async def _validate_unique_cnpj(db: AsyncSession, cnpj: str, exclude_id: Optional[UUID] = None) -> None:
    query = select(Company.id).where(Company.cnpj == cnpj)
    if exclude_id is not None:
        query = query.where(Company.id != exclude_id)
    if (await db.execute(query)).first():
        raise ValidationError(
            message="O CNPJ informado já está sendo utilizado.",
            action="Utilize outro CNPJ para realizar esta operação.",
        )
