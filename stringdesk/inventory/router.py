from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_current_stringer
from stringdesk.catalog.index import Catalog
from stringdesk.catalog.service import get_catalog
from stringdesk.inventory.schemas import InventoryItemCreate, InventoryItemUpdate, InventoryItemResponse
from stringdesk.inventory.service import InventoryService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.post("", response_model=InventoryItemResponse)
async def create_item(
    item: InventoryItemCreate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = InventoryService(db, catalog)
    try:
        return await service.create_item(item, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[InventoryItemResponse])
async def list_items(
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    return await InventoryService(db).list_items(current_user.id)


@router.get("/low-stock", response_model=List[InventoryItemResponse])
async def list_low_stock(
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    return await InventoryService(db).list_items(current_user.id, low_stock_only=True)


@router.patch("/{item_id}", response_model=InventoryItemResponse)
async def update_item(
    item_id: UUID,
    item: InventoryItemUpdate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = InventoryService(db, catalog)
    try:
        return await service.update_item(item_id, current_user.id, item)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
