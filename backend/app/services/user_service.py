"""
User service. Usernames are unique inside a company; emails are unique
across every tenant.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UserRecord
from app.services.patching import apply_patch, write_record, changed
from app.core.errors import NotFoundError, ValidationError
from app.core.security import hash_password
from app.core.logging import get_logger

logger = get_logger(__name__)


async def find_one_by_id(db: AsyncSession, user_id: UUID, company_id: UUID) -> User:
    result = await db.execute(
        select(User)
        .where(User.id == user_id, User.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError(
            message="Usuário não encontrado nesta empresa.",
            action="Verifique se o usuário pertence à empresa correta.",
        )
    return user


async def find_one_by_username(db: AsyncSession, username: str, company_id: UUID) -> User:
    result = await db.execute(
        select(User).where(
            func.lower(User.username) == username.lower(),
            User.company_id == company_id,
        )
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError(
            message="O username informado não foi encontrado no sistema.",
            action="Verifique se o username está digitado corretamente.",
        )
    return user


async def find_one_by_username_in_company(db: AsyncSession, username: str, company_slug: str) -> User:
    result = await db.execute(
        select(User)
        .join(Company, User.company_id == Company.id)
        .where(
            func.lower(User.username) == username.lower(),
            func.lower(Company.slug) == company_slug.lower(),
        )
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError(
            message="O username informado não foi encontrado no sistema.",
            action="Verifique se o username está digitado corretamente.",
        )
    return user


async def find_one_by_email(db: AsyncSession, email: str) -> User:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError(
            message="O email informado não foi encontrado no sistema.",
            action="Verifique se o email está digitado corretamente.",
        )
    return user


async def find_all_by_company(db: AsyncSession, company_id: UUID) -> list[User]:
    result = await db.execute(
        select(User)
        .where(User.company_id == company_id, User.status.is_(True))
        .order_by(User.username.asc())
    )
    return list(result.scalars().all())


async def create(db: AsyncSession, user_data: UserCreate, company_id: UUID) -> User:
    await _validate_unique_username(db, user_data.username, company_id)
    await _validate_unique_email(db, user_data.email)

    user = User(
        company_id=company_id,
        username=user_data.username,
        email=user_data.email,
        password=hash_password(user_data.password),
        role=user_data.role,
    )
    db.add(user)
    await db.flush()

    logger.info("user_created", user_id=str(user.id), role=user.role)
    return await find_one_by_id(db, user.id, company_id)


async def update(db: AsyncSession, user_id: UUID, user_data: UserUpdate, company_id: UUID) -> User:
    user = await find_one_by_id(db, user_id, company_id)

    if changed(user_data, "username", user.username):
        await _validate_unique_username(db, user_data.username, company_id, exclude_id=user.id)
    if changed(user_data, "email", user.email):
        await _validate_unique_email(db, user_data.email, exclude_id=user.id)

    if user_data.password is not None:
        user_data = user_data.model_copy(update={"password": hash_password(user_data.password)})

    record = apply_patch(UserRecord, user, user_data)
    write_record(user, record)
    await db.flush()

    logger.info("user_updated", user_id=str(user.id))
    return await find_one_by_id(db, user.id, company_id)


async def _validate_unique_username(
    db: AsyncSession, username: str, company_id: UUID, exclude_id: Optional[UUID] = None
) -> None:
    query = select(User.id).where(
        func.lower(User.username) == username.lower(),
        User.company_id == company_id,
    )
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    if (await db.execute(query)).first():
        raise ValidationError(
            message="O username informado já está sendo utilizado nesta empresa.",
            action="Utilize outro username para realizar esta operação.",
        )


async def _validate_unique_email(db: AsyncSession, email: str, exclude_id: Optional[UUID] = None) -> None:
    query = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    if (await db.execute(query)).first():
        raise ValidationError(
            message="O email informado já está sendo utilizado.",
            action="Utilize outro email para realizar esta operação.",
        )
