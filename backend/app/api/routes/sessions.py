"""
Login sessions: log in with credentials, log out, and the current user.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.cookies import set_session_cookie, clear_session_cookie
from app.api.deps import get_request_context
from app.db.session import get_db
from app.schemas.common import MessageResponse
from app.schemas.session import RequestContext, SessionResponse, CurrentUserResponse
from app.schemas.user import LoginRequest
from app.services import auth_service, session_service
from app.core.config import get_settings

settings = get_settings()
router = APIRouter(tags=["Sessions"])


@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate by email or by username + company slug and open a session."""
    user = await auth_service.authenticate(db, login_data)
    session = await session_service.create(db, user.id, user.company_id)
    set_session_cookie(response, session.token)
    return session


@router.delete("/sessions", response_model=MessageResponse)
async def logout(
    response: Response,
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    await session_service.delete_by_token(db, context.session.token)
    clear_session_cookie(response)
    return MessageResponse(message="Logout realizado com sucesso.")


@router.get("/user", response_model=CurrentUserResponse)
async def get_current_user(
    response: Response,
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """Return the logged-in user and slide the session expiration forward."""
    session = await session_service.renew(db, context.session.id)
    set_session_cookie(response, session.token)
    response.headers["Cache-Control"] = "no-store, no-cache, max-age=0, must-revalidate"
    return CurrentUserResponse(**context.user.model_dump(), company=context.company)
