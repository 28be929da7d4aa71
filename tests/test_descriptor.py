import json
from datetime import datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from stringdesk.catalog.index import Catalog, CatalogEntry, CatalogIndex
from stringdesk.racquets import descriptor as codec
from stringdesk.racquets.descriptor import InvalidDescriptor, RacquetDescriptor, StringingSnapshot

CATALOG = Catalog(
    strings=CatalogIndex(brands=[CatalogEntry(1, "Babolat")], models=[CatalogEntry(101, "RPM Blast", 1)]),
    racquets=CatalogIndex(brands=[CatalogEntry(2, "Wilson")], models=[CatalogEntry(21, "Pro Staff 97", 2)]),
)


def _racquet(**overrides):
    fields = dict(
        id=uuid4(),
        client_id=uuid4(),
        brand_id=2,
        model_id=21,
        head_size=97,
        weight_grams=315.0,
        balance_point="31 cm",
        string_pattern="16x19",
        notes="Leather grip",
        stringing_notes=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _snapshot():
    return StringingSnapshot(
        job_id=uuid4(),
        main_string_model_id=101,
        cross_string_model_id=101,
        tension_main=53.0,
        tension_cross=51.5,
        price=32.5,
        recorded_at=datetime(2026, 4, 2, 17, 45, 12, 250000),
    )


def test_build_descriptor_names_brand_and_model():
    descriptor = codec.build_descriptor(_racquet(), CATALOG, now=datetime(2026, 4, 3))
    assert descriptor.brand_name == "Wilson"
    assert descriptor.model_name == "Pro Staff 97"
    assert descriptor.stringing_snapshot is None


def test_build_descriptor_with_retired_catalog_entries():
    descriptor = codec.build_descriptor(_racquet(brand_id=9, model_id=99), CATALOG)
    assert descriptor.brand_id == 9
    assert descriptor.brand_name is None
    assert descriptor.model_name is None


def test_round_trip_preserves_identity_and_snapshot():
    sent = codec.build_descriptor(_racquet(), CATALOG, snapshot=_snapshot())

    payload = codec.encode(sent)
    decoded = codec.decode(payload)

    assert isinstance(decoded, RacquetDescriptor)
    assert decoded.racquet_id == sent.racquet_id
    assert decoded.brand_id == sent.brand_id
    assert decoded.model_id == sent.model_id
    assert decoded.stringing_snapshot == sent.stringing_snapshot
    assert json.loads(payload)["type"] == "racquet"


def test_decode_accepts_utf8_bytes():
    sent = codec.build_descriptor(_racquet(notes="Grip taille 3, très usé"), CATALOG)
    decoded = codec.decode(codec.encode(sent).encode("utf-8"))
    assert isinstance(decoded, RacquetDescriptor)
    assert decoded.notes == "Grip taille 3, très usé"


@pytest.mark.parametrize(
    "raw",
    [
        "https://example.com/menu",
        "",
        None,
        b"\xff\xfe\x00",
        "[1, 2, 3]",
        '{"racquet_id": "d4b1c6a2-0000-4000-8000-000000000000"}',
        '{"type": "ticket", "racquet_id": "d4b1c6a2-0000-4000-8000-000000000000"}',
        "[" * 5000,
    ],
)
def test_decode_never_raises_on_foreign_payloads(raw):
    result = codec.decode(raw)
    assert isinstance(result, InvalidDescriptor)
    assert result.message == "Not a recognized racquet code"


def test_decode_reports_fields_with_wrong_types():
    payload = json.dumps({
        "type": "racquet",
        "racquet_id": "not-a-uuid",
        "head_size": "huge",
        "generated_at": "2026-04-03T10:00:00",
    })
    result = codec.decode(payload)
    assert isinstance(result, InvalidDescriptor)
    assert "racquet_id" in result.reason
    assert "head_size" in result.reason
