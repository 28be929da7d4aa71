from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

class ClientPreferences(BaseModel):
    default_tension_main: Optional[float] = Field(default=None, gt=0)
    default_tension_cross: Optional[float] = Field(default=None, gt=0)
    preferred_main_brand_id: Optional[int] = None
    preferred_main_model_id: Optional[int] = None
    preferred_cross_brand_id: Optional[int] = None
    preferred_cross_model_id: Optional[int] = None

class ClientBase(ClientPreferences):
    full_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

class ClientCreate(ClientBase):
    customer_email: Optional[EmailStr] = None

class ClientUpdate(ClientBase):
    full_name: Optional[str] = None
    customer_email: Optional[EmailStr] = None

class ClientResponse(ClientBase):
    id: UUID
    stringer_id: UUID
    customer_user_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
