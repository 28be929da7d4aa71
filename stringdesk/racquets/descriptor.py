"""Portable racquet descriptor carried in a racquet's QR code.

The payload is plain UTF-8 JSON. A ``type`` marker separates it from any
other code a user might scan; decoding never raises, it returns an
``InvalidDescriptor`` explaining why the payload was not recognized.

The embedded stringing snapshot is a point-in-time copy. It is good enough to
reprint a receipt while offline, but must be refreshed from the backend
before it seeds a new job.
"""
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stringdesk.catalog.index import Catalog
from stringdesk.shared.models import utcnow

SCHEMA_MARKER = "racquet"


class StringingSnapshot(BaseModel):
    job_id: UUID
    main_string_model_id: Optional[int] = None
    cross_string_model_id: Optional[int] = None
    tension_main: Optional[float] = None
    tension_cross: Optional[float] = None
    price: Optional[float] = None
    recorded_at: datetime

    model_config = ConfigDict(frozen=True)


class RacquetDescriptor(BaseModel):
    schema_marker: Literal["racquet"] = Field(alias="type")
    racquet_id: UUID
    brand_id: Optional[int] = None
    brand_name: Optional[str] = None
    model_id: Optional[int] = None
    model_name: Optional[str] = None
    head_size: Optional[int] = None
    weight_grams: Optional[float] = None
    balance_point: Optional[str] = None
    string_pattern: Optional[str] = None
    notes: Optional[str] = None
    stringing_notes: Optional[str] = None
    client_id: Optional[UUID] = None
    stringing_snapshot: Optional[StringingSnapshot] = None
    generated_at: datetime

    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())


@dataclass(frozen=True)
class InvalidDescriptor:
    reason: str

    message = "Not a recognized racquet code"


DecodeResult = Union[RacquetDescriptor, InvalidDescriptor]


def build_descriptor(
    racquet,
    catalog: Catalog,
    snapshot: Optional[StringingSnapshot] = None,
    now: Optional[datetime] = None,
) -> RacquetDescriptor:
    brand = catalog.racquets.lookup_brand(racquet.brand_id)
    model = catalog.racquets.lookup_model(racquet.model_id)
    return RacquetDescriptor(
        schema_marker=SCHEMA_MARKER,
        racquet_id=racquet.id,
        brand_id=racquet.brand_id,
        brand_name=brand.name if brand else None,
        model_id=racquet.model_id,
        model_name=model.name if model else None,
        head_size=racquet.head_size,
        weight_grams=racquet.weight_grams,
        balance_point=racquet.balance_point,
        string_pattern=racquet.string_pattern,
        notes=racquet.notes,
        stringing_notes=racquet.stringing_notes,
        client_id=racquet.client_id,
        stringing_snapshot=snapshot,
        generated_at=now or utcnow(),
    )


def encode(descriptor: RacquetDescriptor) -> str:
    return descriptor.model_dump_json(by_alias=True)


def decode(raw: Union[str, bytes, None]) -> DecodeResult:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return InvalidDescriptor("Payload is not UTF-8 text")
    if not isinstance(raw, str) or not raw.strip():
        return InvalidDescriptor("Payload is empty")

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        return InvalidDescriptor("Payload is not JSON")

    if not isinstance(data, dict):
        return InvalidDescriptor("Payload is not a JSON object")
    if data.get("type") != SCHEMA_MARKER:
        return InvalidDescriptor("Payload is not a racquet code")

    try:
        return RacquetDescriptor.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]}))
        return InvalidDescriptor(f"Racquet code has invalid fields: {fields}")
