from typing import Optional
from pydantic import BaseModel, ConfigDict
from uuid import UUID


class StringerResponse(BaseModel):
    id: UUID
    full_name: Optional[str] = None
    email: str

    model_config = ConfigDict(from_attributes=True)
