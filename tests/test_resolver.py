from types import SimpleNamespace
from uuid import uuid4

from stringdesk.catalog.index import CatalogEntry, CatalogIndex
from stringdesk.jobs.history import LastKnownSpec
from stringdesk.jobs.resolver import PreferenceResolver, SpecOverride, SpecSource


STRINGS = CatalogIndex(
    brands=[CatalogEntry(7, "Solinco"), CatalogEntry(12, "Babolat"), CatalogEntry(20, "Luxilon")],
    models=[
        CatalogEntry(501, "RPM Blast", 12),
        CatalogEntry(502, "Xcel", 12),
        CatalogEntry(777, "Hyper-G", 7),
        CatalogEntry(801, "ALU Power", 20),
    ],
)


def _client(**prefs):
    fields = {
        "preferred_main_brand_id": None,
        "preferred_main_model_id": None,
        "default_tension_main": None,
        "preferred_cross_brand_id": None,
        "preferred_cross_model_id": None,
        "default_tension_cross": None,
    }
    fields.update(prefs)
    return SimpleNamespace(**fields)


def _racquet():
    return SimpleNamespace(id=uuid4())


def _history(racquet, **fields):
    return LastKnownSpec(source="job", racquet_id=racquet.id, **fields)


def test_override_wins_and_cross_falls_back_to_history():
    racquet = _racquet()
    client = _client(preferred_main_brand_id=12, preferred_main_model_id=501, default_tension_main=55)
    history = _history(racquet, main_model_id=502, cross_model_id=801, tension_main=50, tension_cross=48, price=30)

    spec = PreferenceResolver(STRINGS).resolve(client, racquet, SpecOverride(main_model_id=777), history)

    assert spec.main_model_id == 777
    assert spec.main_brand_id == 7
    assert spec.source_of("main_model_id") == SpecSource.OVERRIDE
    assert spec.tension_main == 55
    assert spec.source_of("tension_main") == SpecSource.CLIENT
    assert spec.cross_model_id == 801
    assert spec.cross_brand_id == 20
    assert spec.tension_cross == 48
    assert spec.source_of("cross_model_id") == SpecSource.HISTORY
    assert spec.price == 30


def test_main_preference_never_fills_cross_side():
    racquet = _racquet()
    client = _client(preferred_main_brand_id=12, preferred_main_model_id=501, default_tension_main=55)

    spec = PreferenceResolver(STRINGS).resolve(client, racquet)

    assert spec.main_model_id == 501
    assert spec.cross_brand_id is None
    assert spec.cross_model_id is None
    assert spec.tension_cross is None


def test_resolved_brand_always_owns_resolved_model():
    racquet = _racquet()
    # client brand wins the brand, history model belongs to another brand and must be dropped
    client = _client(preferred_cross_brand_id=12)
    history = _history(racquet, cross_model_id=801)

    spec = PreferenceResolver(STRINGS).resolve(client, racquet, last_known=history)

    assert spec.cross_brand_id == 12
    assert spec.cross_model_id is None


def test_model_from_lower_layer_kept_when_it_matches_brand():
    racquet = _racquet()
    client = _client(preferred_main_brand_id=12)
    history = _history(racquet, main_model_id=502)

    spec = PreferenceResolver(STRINGS).resolve(client, racquet, last_known=history)

    assert (spec.main_brand_id, spec.main_model_id) == (12, 502)
    assert spec.source_of("main_brand_id") == SpecSource.CLIENT
    assert spec.source_of("main_model_id") == SpecSource.HISTORY
    assert STRINGS.model_belongs_to(spec.main_model_id, spec.main_brand_id)


def test_unknown_ids_are_ignored():
    racquet = _racquet()
    client = _client(preferred_main_brand_id=99, preferred_main_model_id=9999)
    history = _history(racquet, main_model_id=501)

    spec = PreferenceResolver(STRINGS).resolve(client, racquet, last_known=history)

    assert (spec.main_brand_id, spec.main_model_id) == (12, 501)


def test_history_of_another_racquet_is_ignored():
    racquet = _racquet()
    history = _history(_racquet(), main_model_id=501, tension_main=50)

    spec = PreferenceResolver(STRINGS).resolve(_client(), racquet, last_known=history)

    assert spec.is_empty


def test_non_positive_tension_is_treated_as_unset():
    racquet = _racquet()
    client = _client(default_tension_main=0)
    history = _history(racquet, tension_main=51)

    spec = PreferenceResolver(STRINGS).resolve(client, racquet, last_known=history)

    assert spec.tension_main == 51
