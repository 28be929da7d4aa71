from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_current_stringer
from stringdesk.catalog.index import Catalog
from stringdesk.catalog.service import get_catalog
from stringdesk.clients.schemas import ClientCreate, ClientUpdate, ClientResponse
from stringdesk.clients.service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=ClientResponse)
async def create_client(
    client: ClientCreate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = ClientService(db, catalog)
    try:
        return await service.create_client(client, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    return await service.list_clients(current_user.id, skip, limit, search)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: UUID,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    return await service.get_client(client_id, current_user.id)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: UUID,
    client: ClientUpdate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = ClientService(db, catalog)
    try:
        return await service.update_client(client_id, current_user.id, client)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: UUID,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    await service.delete_client(client_id, current_user.id)
    return Response(status_code=204)
