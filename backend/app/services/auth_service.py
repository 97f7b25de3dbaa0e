"""
Authentication: resolves login credentials to a user.

Two credential shapes are accepted:
  - email + password (email is globally unique)
  - username + company_slug + password (username is unique per company)

Every failure that could reveal whether an account exists (unknown user,
wrong password, inactive tenant) is reported with the same generic
Unauthorized error. The specific reason only reaches the logs.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.schemas.user import LoginRequest
from app.services import user_service
from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.core.security import verify_password
from app.core.metrics import record_login
from app.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_MESSAGE = "Dados de autenticação não conferem."
GENERIC_ACTION = "Verifique se os dados enviados estão corretos."


def validate_login_shape(login_data: LoginRequest) -> None:
    if login_data.email or (login_data.username and login_data.company_slug):
        return
    raise ValidationError(
        message="Dados de login insuficientes.",
        action="Informe email+password ou username+company_slug+password.",
    )


async def authenticate(db: AsyncSession, login_data: LoginRequest) -> User:
    validate_login_shape(login_data)

    try:
        user = await _find_user(db, login_data)
        _validate_password(login_data.password, user.password)
        _validate_company(user)
    except UnauthorizedError as e:
        record_login(success=False)
        logger.warning(
            "login_failed",
            reason=e.message,
            email=login_data.email,
            username=login_data.username,
            company_slug=login_data.company_slug,
        )
        raise UnauthorizedError(message=GENERIC_MESSAGE, action=GENERIC_ACTION, cause=e)

    record_login(success=True)
    logger.info("user_authenticated", user_id=str(user.id), company_id=str(user.company_id))
    return user


async def _find_user(db: AsyncSession, login_data: LoginRequest) -> User:
    try:
        if login_data.email:
            user = await user_service.find_one_by_email(db, login_data.email)
        else:
            user = await user_service.find_one_by_username_in_company(
                db, login_data.username, login_data.company_slug
            )
    except NotFoundError as e:
        raise UnauthorizedError(message="Usuário não encontrado.", cause=e)

    if not user.status:
        raise UnauthorizedError(message="Usuário inativo.")
    return user


def _validate_password(provided: str, stored: str) -> None:
    if not verify_password(provided, stored):
        raise UnauthorizedError(message="Senha não confere.")


def _validate_company(user: User) -> None:
    company = user.company
    if not company.is_active:
        raise UnauthorizedError(message="Empresa inativa.")
    if company.subscription_status == "suspended":
        raise UnauthorizedError(message="Assinatura da empresa suspensa.")
    if company.subscription_status == "cancelled":
        raise UnauthorizedError(message="Assinatura da empresa cancelada.")
