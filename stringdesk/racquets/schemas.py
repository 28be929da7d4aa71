from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from stringdesk.jobs.schemas import EffectiveSpecResponse
from stringdesk.racquets.descriptor import RacquetDescriptor, StringingSnapshot

class RacquetBase(BaseModel):
    head_size: Optional[int] = Field(default=None, gt=0)
    string_pattern: Optional[str] = None
    weight_grams: Optional[float] = Field(default=None, gt=0)
    balance_point: Optional[str] = None
    stiffness_rating: Optional[int] = Field(default=None, ge=0)
    length_cm: Optional[float] = Field(default=None, gt=0)
    notes: Optional[str] = None
    stringing_notes: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())

class RacquetCreate(RacquetBase):
    client_id: UUID
    brand_id: int
    model_id: int

class RacquetUpdate(RacquetBase):
    brand_id: Optional[int] = None
    model_id: Optional[int] = None
    is_active: Optional[bool] = None

class RacquetResponse(RacquetBase):
    id: UUID
    client_id: UUID
    brand_id: int
    model_id: int
    is_active: bool
    last_stringing_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

class QRCodeResponse(BaseModel):
    payload: str
    descriptor: RacquetDescriptor

class ScanRequest(BaseModel):
    payload: str

class ScanResponse(BaseModel):
    recognized: bool
    message: Optional[str] = None
    reason: Optional[str] = None
    descriptor: Optional[RacquetDescriptor] = None
    racquet: Optional[RacquetResponse] = None
    latest_snapshot: Optional[StringingSnapshot] = None
    snapshot_is_current: Optional[bool] = None
    suggested_spec: Optional[EffectiveSpecResponse] = None
