"""
First-run bootstrap endpoint.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.session import SessionCompany, SessionUser
from app.schemas.setup import SetupResponse
from app.services import setup_service

router = APIRouter(prefix="/setup", tags=["Setup"])


@router.post("", response_model=SetupResponse, status_code=status.HTTP_201_CREATED)
async def run_setup(db: AsyncSession = Depends(get_db)):
    """Create the default company and its admin user if they do not exist yet."""
    company, user = await setup_service.ensure_default_tenant(db)
    return SetupResponse(
        message="Empresa e usuário padrão criados com sucesso",
        company=SessionCompany.model_validate(company),
        user=SessionUser.model_validate(user),
    )
