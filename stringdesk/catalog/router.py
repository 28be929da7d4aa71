from typing import List, Literal
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_catalog_admin, get_current_active_user
from stringdesk.catalog.index import Catalog, CatalogIndex
from stringdesk.catalog.schemas import CatalogEntryResponse, CatalogReloadResponse
from stringdesk.catalog.service import get_catalog, reload_catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])

CatalogKind = Literal["strings", "racquets"]


def _index(catalog: Catalog, kind: CatalogKind) -> CatalogIndex:
    return catalog.strings if kind == "strings" else catalog.racquets


@router.get("/{kind}/brands", response_model=List[CatalogEntryResponse])
async def list_brands(
    kind: CatalogKind,
    current_user: User = Depends(get_current_active_user),
    catalog: Catalog = Depends(get_catalog),
):
    return _index(catalog, kind).brands()


@router.get("/{kind}/brands/{brand_id}/models", response_model=List[CatalogEntryResponse])
async def list_models_for_brand(
    kind: CatalogKind,
    brand_id: int,
    current_user: User = Depends(get_current_active_user),
    catalog: Catalog = Depends(get_catalog),
):
    return list(_index(catalog, kind).models_for_brand(brand_id))


@router.post("/reload", response_model=CatalogReloadResponse)
async def reload(
    current_user: User = Depends(get_catalog_admin),
    db: AsyncSession = Depends(get_db),
):
    catalog = await reload_catalog(db)
    return {
        "string_models": len(catalog.strings),
        "racquet_models": len(catalog.racquets),
        "loaded_at": catalog.loaded_at,
    }
