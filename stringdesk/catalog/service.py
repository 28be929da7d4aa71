import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stringdesk.database import get_db
from stringdesk.catalog.index import Catalog, CatalogEntry, CatalogIndex
from stringdesk.catalog.models import StringBrand, StringModel, RacquetBrand, RacquetModel

logger = logging.getLogger(__name__)

# ---------- simple in-process cache ----------
_CATALOG_CACHE: Optional[Catalog] = None


async def _read_index(db: AsyncSession, brand_table, model_table) -> CatalogIndex:
    brands = (await db.execute(select(brand_table))).scalars().all()
    models = (await db.execute(select(model_table))).scalars().all()
    return CatalogIndex(
        brands=[CatalogEntry(id=b.id, name=b.name) for b in brands],
        models=[CatalogEntry(id=m.id, name=m.name, brand_id=m.brand_id) for m in models],
    )


async def _read_catalog_from_db(db: AsyncSession) -> Catalog:
    catalog = Catalog(
        strings=await _read_index(db, StringBrand, StringModel),
        racquets=await _read_index(db, RacquetBrand, RacquetModel),
    )
    logger.info(
        f"Catalog loaded: {len(catalog.strings)} string models, "
        f"{len(catalog.racquets)} racquet models"
    )
    return catalog


async def load_catalog(db: AsyncSession) -> Catalog:
    global _CATALOG_CACHE
    if _CATALOG_CACHE is None:
        _CATALOG_CACHE = await _read_catalog_from_db(db)
    return _CATALOG_CACHE


async def reload_catalog(db: AsyncSession) -> Catalog:
    """
    Build a fresh snapshot and swap it in; the previous snapshot is left intact
    for anyone still holding it.
    """
    global _CATALOG_CACHE
    catalog = await _read_catalog_from_db(db)
    _CATALOG_CACHE = catalog
    return catalog


def clear_catalog_cache() -> None:
    global _CATALOG_CACHE
    _CATALOG_CACHE = None


async def get_catalog(db: AsyncSession = Depends(get_db)) -> Catalog:
    return await load_catalog(db)


def cached_catalog() -> Optional[Catalog]:
    """The snapshot currently served, or None before the first load."""
    return _CATALOG_CACHE
