"""
Login sessions.

A session is valid only while it is unexpired AND its user is active AND its
company is active; all three are checked in one query so a deactivated user
or tenant loses access immediately.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from app.models.session import UserSession
from app.models.user import User
from app.core.config import get_settings
from app.core.errors import UnauthorizedError
from app.core.security import generate_session_token
from app.core.logging import get_logger

logger = get_logger(__name__)


def _expiration() -> datetime:
    return datetime.now(timezone.utc) + get_settings().session_lifetime


async def create(db: AsyncSession, user_id: UUID, company_id: UUID) -> UserSession:
    session = UserSession(
        token=generate_session_token(),
        user_id=user_id,
        company_id=company_id,
        expires_at=_expiration(),
    )
    db.add(session)
    await db.flush()

    logger.info("session_created", session_id=str(session.id), user_id=str(user_id))
    return await _find_by_id(db, session.id)


async def find_valid_by_token(db: AsyncSession, token: str) -> UserSession:
    result = await db.execute(
        select(UserSession)
        .join(User, UserSession.user_id == User.id)
        .join(Company, UserSession.company_id == Company.id)
        .where(
            UserSession.token == token,
            UserSession.expires_at > datetime.now(timezone.utc),
            User.status.is_(True),
            Company.is_active.is_(True),
        )
        .execution_options(populate_existing=True)
    )
    session = result.scalar_one_or_none()
    if not session:
        raise UnauthorizedError(
            message="Sessão inválida ou expirada.",
            action="Faça login novamente.",
        )
    return session


async def renew(db: AsyncSession, session_id: UUID) -> UserSession:
    """Slide the expiration window forward from now."""
    await db.execute(
        update(UserSession)
        .where(UserSession.id == session_id)
        .values(expires_at=_expiration(), updated_at=datetime.now(timezone.utc))
    )
    return await _find_by_id(db, session_id)


async def delete_by_token(db: AsyncSession, token: str) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.token == token))
    logger.info("session_deleted", count=result.rowcount)
    return result.rowcount


async def delete_all_by_user(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    logger.info("sessions_deleted_for_user", user_id=str(user_id), count=result.rowcount)
    return result.rowcount


async def _find_by_id(db: AsyncSession, session_id: UUID) -> UserSession:
    result = await db.execute(
        select(UserSession)
        .where(UserSession.id == session_id)
        .execution_options(populate_existing=True)
    )
    session = result.scalar_one_or_none()
    if not session:
        raise UnauthorizedError(
            message="Sessão inválida ou expirada.",
            action="Faça login novamente.",
        )
    return session
