"""
Company endpoints. A caller only ever sees and edits its own company.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_request_context, require_active_subscription, require_role
from app.db.session import get_db
from app.models.company import Company
from app.schemas.company import CompanyCreate, CompanyUpdate, CompanyResponse
from app.schemas.session import RequestContext
from app.services import company_service
from app.core.errors import UnauthorizedError

router = APIRouter(prefix="/companies", tags=["Companies"])


def _ensure_own_company(company: Company, context: RequestContext) -> None:
    if company.id != context.company.id:
        raise UnauthorizedError(
            message="Acesso negado a esta empresa.",
            action="Verifique se você tem permissão para acessar esta empresa.",
        )


@router.get("", response_model=CompanyResponse)
async def get_own_company(
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.find_one_by_id(db, context.company.id)


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(
    company_data: CompanyCreate,
    context: RequestContext = Depends(require_role(["admin"])),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.create(db, company_data)


@router.get(
    "/{slug}",
    response_model=CompanyResponse,
    dependencies=[Depends(require_active_subscription)],
)
async def get_company(
    slug: str,
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    company = await company_service.find_one_by_slug(db, slug)
    _ensure_own_company(company, context)
    return company


@router.patch(
    "/{slug}",
    response_model=CompanyResponse,
    dependencies=[Depends(require_active_subscription)],
)
async def update_company(
    slug: str,
    company_data: CompanyUpdate,
    context: RequestContext = Depends(require_role(["admin"])),
    db: AsyncSession = Depends(get_db),
):
    company = await company_service.find_one_by_slug(db, slug)
    _ensure_own_company(company, context)
    return await company_service.update(db, company.id, company_data)
