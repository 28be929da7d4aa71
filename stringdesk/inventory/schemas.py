from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

class InventoryItemBase(BaseModel):
    string_brand_id: Optional[int] = None
    string_model_id: Optional[int] = None
    gauge: Optional[str] = None
    color: Optional[str] = None
    length_meters: float = Field(default=12, gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    cost_per_set: float = Field(default=0, ge=0)

class InventoryItemCreate(InventoryItemBase):
    pass

class InventoryItemUpdate(InventoryItemBase):
    length_meters: Optional[float] = Field(default=None, gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    cost_per_set: Optional[float] = Field(default=None, ge=0)

class InventoryItemResponse(InventoryItemBase):
    id: UUID
    stringer_id: UUID
    min_stock_level: int
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.min_stock_level

    model_config = ConfigDict(from_attributes=True)
