import logging
from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from stringdesk.config import settings
from stringdesk.catalog.index import Catalog
from stringdesk.inventory.models import StringInventoryItem
from stringdesk.inventory.schemas import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, db: AsyncSession, catalog: Optional[Catalog] = None):
        self.db = db
        self.catalog = catalog

    def _validate_string(self, brand_id: Optional[int], model_id: Optional[int]) -> None:
        if self.catalog is None:
            return
        strings = self.catalog.strings
        if brand_id is not None and strings.lookup_brand(brand_id) is None:
            raise ValueError(f"Unknown string brand {brand_id}")
        if model_id is not None:
            model = strings.lookup_model(model_id)
            if model is None:
                raise ValueError(f"Unknown string model {model_id}")
            if brand_id is not None and model.brand_id != brand_id:
                raise ValueError(f"String model {model_id} does not belong to brand {brand_id}")

    async def create_item(self, item_in: InventoryItemCreate, stringer_id: UUID) -> StringInventoryItem:
        data = item_in.model_dump()
        self._validate_string(data["string_brand_id"], data["string_model_id"])
        if data["min_stock_level"] is None:
            data["min_stock_level"] = settings.LOW_STOCK_THRESHOLD_DEFAULT
        item = StringInventoryItem(**data, stringer_id=stringer_id)
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def list_items(self, stringer_id: UUID, low_stock_only: bool = False) -> List[StringInventoryItem]:
        query = select(StringInventoryItem).where(StringInventoryItem.stringer_id == stringer_id)
        if low_stock_only:
            query = query.where(StringInventoryItem.stock_quantity <= StringInventoryItem.min_stock_level)
        result = await self.db.execute(query.order_by(StringInventoryItem.created_at))
        return list(result.scalars().all())

    async def get_item(self, item_id: UUID, stringer_id: UUID) -> StringInventoryItem:
        result = await self.db.execute(
            select(StringInventoryItem).where(
                StringInventoryItem.id == item_id,
                StringInventoryItem.stringer_id == stringer_id,
            )
        )
        item = result.scalar_one_or_none()
        if not item:
            raise HTTPException(status_code=404, detail="Inventory item not found")
        return item

    async def update_item(self, item_id: UUID, stringer_id: UUID, item_in: InventoryItemUpdate) -> StringInventoryItem:
        item = await self.get_item(item_id, stringer_id)
        update_data = item_in.model_dump(exclude_unset=True)
        self._validate_string(
            update_data.get("string_brand_id", item.string_brand_id),
            update_data.get("string_model_id", item.string_model_id),
        )
        for field, value in update_data.items():
            if value is None and field in ("length_meters", "stock_quantity", "min_stock_level", "cost_per_set"):
                continue
            setattr(item, field, value)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def consume_sets(self, stringer_id: UUID, model_ids: Iterable[Optional[int]]) -> List[StringInventoryItem]:
        """Take one set per distinct string model off the stringer's stock.

        The caller commits. Stock never drops below zero; models the stringer
        does not track are skipped.
        """
        consumed = []
        for model_id in dict.fromkeys(m for m in model_ids if m is not None):
            result = await self.db.execute(
                select(StringInventoryItem)
                .where(
                    StringInventoryItem.stringer_id == stringer_id,
                    StringInventoryItem.string_model_id == model_id,
                    StringInventoryItem.stock_quantity > 0,
                )
                .order_by(StringInventoryItem.stock_quantity.desc())
                .limit(1)
            )
            item = result.scalars().first()
            if item is None:
                logger.info(f"String model {model_id} not in stock for stringer {stringer_id}, nothing consumed")
                continue
            item.stock_quantity -= 1
            consumed.append(item)
            if item.stock_quantity <= item.min_stock_level:
                logger.warning(
                    f"Low stock for string model {model_id}: {item.stock_quantity} set(s) left "
                    f"(minimum {item.min_stock_level})"
                )
        return consumed
