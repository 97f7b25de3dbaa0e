"""
Client (customer) endpoints, scoped to the caller's company.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_active_subscription, require_role
from app.db.session import get_db
from app.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from app.schemas.session import RequestContext
from app.services import client_service

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    dependencies=[Depends(require_active_subscription)],
)

CLIENT_WRITERS = ["admin", "manager", "operator"]


@router.get("", response_model=list[ClientResponse])
async def list_clients(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    return await client_service.find_all_by_company(db, context.company.id, limit=limit, offset=offset)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    context: RequestContext = Depends(require_role(CLIENT_WRITERS)),
    db: AsyncSession = Depends(get_db),
):
    return await client_service.create(db, client_data, context.user.id, context.company.id)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: UUID,
    context: RequestContext = Depends(require_active_subscription),
    db: AsyncSession = Depends(get_db),
):
    return await client_service.find_one_by_id(db, client_id, context.company.id)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: UUID,
    client_data: ClientUpdate,
    context: RequestContext = Depends(require_role(CLIENT_WRITERS)),
    db: AsyncSession = Depends(get_db),
):
    return await client_service.update(db, client_id, client_data, context.company.id)
