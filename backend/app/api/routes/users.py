"""
User endpoints, scoped to the caller's company.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_active_subscription, require_role
from app.db.session import get_db
from app.schemas.session import RequestContext
from app.schemas.user import UserCreate, UserUpdate, UserResponse
from app.services import user_service

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_active_subscription)],
)


@router.get("", response_model=list[UserResponse])
async def list_users(
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    """Active users of the company, ordered by username."""
    return await user_service.find_all_by_company(db, context.company.id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    context: RequestContext = Depends(require_role(["admin", "manager"])),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.create(db, user_data, context.company.id)


@router.get("/{username}", response_model=UserResponse)
async def get_user(
    username: str,
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.find_one_by_username(db, username, context.company.id)


@router.patch("/{username}", response_model=UserResponse)
async def update_user(
    username: str,
    user_data: UserUpdate,
    context: RequestContext = Depends(require_role(["admin", "manager"])),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.find_one_by_username(db, username, context.company.id)
    return await user_service.update(db, user.id, user_data, context.company.id)
