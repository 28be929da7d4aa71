from datetime import datetime
from uuid import UUID
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from stringdesk.jobs.models import JobStatus, JobType
from stringdesk.jobs import lifecycle
from stringdesk.jobs.resolver import EffectiveSpec, SpecOverride, SpecSource
from stringdesk.catalog.index import CatalogIndex


class StringingSpecIn(BaseModel):
    """Strings and tensions explicitly chosen for one job."""
    main_brand_id: Optional[int] = None
    main_string_model_id: Optional[int] = None
    tension_main: Optional[float] = Field(default=None, gt=0)
    cross_brand_id: Optional[int] = None
    cross_string_model_id: Optional[int] = None
    tension_cross: Optional[float] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)

    def to_override(self) -> SpecOverride:
        return SpecOverride(
            main_brand_id=self.main_brand_id,
            main_model_id=self.main_string_model_id,
            tension_main=self.tension_main,
            cross_brand_id=self.cross_brand_id,
            cross_model_id=self.cross_string_model_id,
            tension_cross=self.tension_cross,
            price=self.price,
        )

    def is_empty(self) -> bool:
        return not any(value is not None for value in self.model_dump().values())


class ResolveSpecRequest(BaseModel):
    client_id: UUID
    racquet_id: UUID
    override: Optional[StringingSpecIn] = None


# resolver field name -> response field name
_RESPONSE_FIELDS = {
    "main_model_id": "main_string_model_id",
    "cross_model_id": "cross_string_model_id",
}


class EffectiveSpecResponse(BaseModel):
    main_brand_id: Optional[int] = None
    main_string_model_id: Optional[int] = None
    main_label: Optional[str] = None
    tension_main: Optional[float] = None
    cross_brand_id: Optional[int] = None
    cross_string_model_id: Optional[int] = None
    cross_label: Optional[str] = None
    tension_cross: Optional[float] = None
    price: Optional[float] = None
    sources: Dict[str, SpecSource] = {}

    @classmethod
    def from_spec(cls, spec: EffectiveSpec, strings: CatalogIndex) -> "EffectiveSpecResponse":
        return cls(
            main_brand_id=spec.main_brand_id,
            main_string_model_id=spec.main_model_id,
            main_label=strings.label(spec.main_model_id) if spec.main_model_id is not None else None,
            tension_main=spec.tension_main,
            cross_brand_id=spec.cross_brand_id,
            cross_string_model_id=spec.cross_model_id,
            cross_label=strings.label(spec.cross_model_id) if spec.cross_model_id is not None else None,
            tension_cross=spec.tension_cross,
            price=spec.price,
            sources={_RESPONSE_FIELDS.get(name, name): source for name, source in spec.sources.items()},
        )


class JobCreate(BaseModel):
    client_id: UUID
    racquet_id: UUID
    job_type: JobType = JobType.STRINGING
    job_notes: Optional[str] = None
    due_date: Optional[datetime] = None
    stringing: Optional[StringingSpecIn] = None


class JobUpdate(BaseModel):
    job_notes: Optional[str] = None
    due_date: Optional[datetime] = None


class AdvanceRequest(BaseModel):
    target: Optional[JobStatus] = None


class StringingDetailResponse(BaseModel):
    main_brand_id: Optional[int] = None
    main_string_model_id: Optional[int] = None
    cross_brand_id: Optional[int] = None
    cross_string_model_id: Optional[int] = None
    tension_main: Optional[float] = None
    tension_cross: Optional[float] = None
    price: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class JobResponse(BaseModel):
    id: UUID
    client_id: UUID
    racquet_id: UUID
    stringer_id: UUID
    job_type: JobType
    job_status: JobStatus
    job_notes: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    stringing_detail: Optional[StringingDetailResponse] = None

    @computed_field
    @property
    def next_status(self) -> Optional[JobStatus]:
        return lifecycle.next_status(self.job_status)

    model_config = ConfigDict(from_attributes=True)
