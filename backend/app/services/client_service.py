"""
Client service: tenant-scoped customer records.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.schemas.client import ClientCreate, ClientUpdate, ClientRecord
from app.services.patching import apply_patch, write_record, changed
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger

logger = get_logger(__name__)


async def find_one_by_id(db: AsyncSession, client_id: UUID, company_id: UUID) -> Client:
    result = await db.execute(
        select(Client)
        .where(Client.id == client_id, Client.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    client = result.scalar_one_or_none()
    if not client:
        raise NotFoundError(
            message="O cliente informado não foi encontrado no sistema.",
            action="Verifique se o ID está digitado corretamente.",
        )
    return client


async def find_one_by_cpfcnpj(db: AsyncSession, cpfcnpj: str, company_id: UUID) -> Client:
    result = await db.execute(
        select(Client).where(Client.cpfcnpj == cpfcnpj, Client.company_id == company_id)
    )
    client = result.scalar_one_or_none()
    if not client:
        raise NotFoundError(
            message="O CPF/CNPJ informado não foi encontrado no sistema.",
            action="Verifique se o CPF/CNPJ está digitado corretamente.",
        )
    return client


async def find_all_by_company(
    db: AsyncSession,
    company_id: UUID,
    limit: int = 50,
    offset: int = 0,
) -> list[Client]:
    result = await db.execute(
        select(Client)
        .where(Client.company_id == company_id)
        .order_by(Client.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def create(db: AsyncSession, client_data: ClientCreate, user_id: UUID, company_id: UUID) -> Client:
    await _validate_unique_cpfcnpj(db, client_data.cpfcnpj, company_id)

    client = Client(
        user_id=user_id,
        company_id=company_id,
        **client_data.model_dump(),
    )
    db.add(client)
    await db.flush()

    logger.info("client_created", client_id=str(client.id))
    return await find_one_by_id(db, client.id, company_id)


async def update(db: AsyncSession, client_id: UUID, client_data: ClientUpdate, company_id: UUID) -> Client:
    client = await find_one_by_id(db, client_id, company_id)

    if changed(client_data, "cpfcnpj", client.cpfcnpj):
        await _validate_unique_cpfcnpj(db, client_data.cpfcnpj, company_id, exclude_id=client.id)

    record = apply_patch(ClientRecord, client, client_data)
    write_record(client, record)
    await db.flush()

    logger.info("client_updated", client_id=str(client.id))
    return await find_one_by_id(db, client.id, company_id)


async def _validate_unique_cpfcnpj(
    db: AsyncSession, cpfcnpj: str, company_id: UUID, exclude_id: Optional[UUID] = None
) -> None:
    query = select(Client.id).where(Client.cpfcnpj == cpfcnpj, Client.company_id == company_id)
    if exclude_id is not None:
        query = query.where(Client.id != exclude_id)
    if (await db.execute(query)).first():
        raise ValidationError(
            message="O CPF/CNPJ informado já está sendo utilizado.",
            action="Utilize outro CPF/CNPJ para realizar esta operação.",
        )
