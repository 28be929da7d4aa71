from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class CatalogEntryResponse(BaseModel):
    id: int
    name: str
    brand_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class CatalogReloadResponse(BaseModel):
    string_models: int
    racquet_models: int
    loaded_at: datetime
