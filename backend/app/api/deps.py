"""
Authorization dependencies.

`get_request_context` turns the session cookie into a RequestContext
{user, company, session}. The guards below build on it; FastAPI caches the
context per request so the session is looked up once however many guards an
endpoint stacks.
"""

from typing import Iterable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.user import ROLE_LEVELS
from app.schemas.session import RequestContext, ContextUser, ContextCompany, ContextSession
from app.services import session_service
from app.core.config import get_settings
from app.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from app.core.logging import bind_tenant

settings = get_settings()


async def get_request_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedError(
            message="Usuário não autenticado.",
            action="Faça login para continuar.",
        )

    try:
        session = await session_service.find_valid_by_token(db, token)
    except (UnauthorizedError, NotFoundError) as e:
        raise UnauthorizedError(
            message="Sessão inválida ou expirada.",
            action="Faça login novamente.",
            cause=e,
        )

    context = RequestContext(
        user=ContextUser.model_validate(session.user),
        company=ContextCompany.model_validate(session.company),
        session=ContextSession.model_validate(session),
    )

    # Read back by the request middleware when logging failures
    request.state.user_id = str(context.user.id)
    request.state.company_slug = context.company.slug
    bind_tenant(str(context.user.id), context.company.slug)
    return context


async def require_active_subscription(
    context: RequestContext = Depends(get_request_context),
) -> RequestContext:
    if context.company.subscription_status != "active":
        raise UnauthorizedError(
            message="Subscription inativa ou suspensa.",
            action="Entre em contato com o suporte para regularizar.",
        )
    return context


def require_role(allowed_roles: Iterable[str]):
    """
    Role levels are ordered (admin > manager > operator > viewer); a caller
    passes when its level reaches the lowest level in `allowed_roles`.
    """
    min_level = min(ROLE_LEVELS[role] for role in allowed_roles)

    async def role_checker(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if ROLE_LEVELS.get(context.user.role, 0) < min_level:
            raise ForbiddenError(
                message="Você não possui permissão para acessar este recurso.",
                action="Verifique se você possui as permissões necessárias.",
            )
        return context

    return role_checker


def require_plan(allowed_plans: Iterable[str]):
    allowed = set(allowed_plans)

    async def plan_checker(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if context.company.subscription_plan not in allowed:
            raise UnauthorizedError(
                message="Plano insuficiente para esta funcionalidade.",
                action="Faça upgrade do plano para acessar esta funcionalidade.",
            )
        return context

    return plan_checker
