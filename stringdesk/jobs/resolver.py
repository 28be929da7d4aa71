"""Effective stringing setup for a job.

Every field resolves on its own down the same chain: the explicit choice for
this job, then the client's stored preference, then the racquet's last known
setup. A field no layer supplies stays unset.

Brand and model of a side are resolved as a pair. The brand comes from the
first layer that names one (directly, or through the brand of its model) and
the model from the first layer whose model belongs to that brand. Ids the
catalog does not know are ignored, so the result never carries a dangling id.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from stringdesk.catalog.index import CatalogIndex

SIDES = ("main", "cross")


class SpecSource(str, Enum):
    OVERRIDE = "override"
    CLIENT = "client"
    HISTORY = "history"


@dataclass(frozen=True)
class SpecOverride:
    main_brand_id: Optional[int] = None
    main_model_id: Optional[int] = None
    tension_main: Optional[float] = None
    cross_brand_id: Optional[int] = None
    cross_model_id: Optional[int] = None
    tension_cross: Optional[float] = None
    price: Optional[float] = None


@dataclass(frozen=True)
class EffectiveSpec:
    main_brand_id: Optional[int] = None
    main_model_id: Optional[int] = None
    tension_main: Optional[float] = None
    cross_brand_id: Optional[int] = None
    cross_model_id: Optional[int] = None
    tension_cross: Optional[float] = None
    price: Optional[float] = None
    sources: Dict[str, SpecSource] = field(default_factory=dict)

    def source_of(self, field_name: str) -> Optional[SpecSource]:
        return self.sources.get(field_name)

    @property
    def is_empty(self) -> bool:
        return not self.sources


class _Layer(NamedTuple):
    source: SpecSource
    brand_id: Optional[int]
    model_id: Optional[int]
    tension: Optional[float]


def _positive(value) -> Optional[float]:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


class PreferenceResolver:
    def __init__(self, strings: CatalogIndex):
        self.strings = strings

    def _layers(self, side: str, client, override: Optional[SpecOverride], last_known) -> List[_Layer]:
        layers = []
        if override is not None:
            layers.append(_Layer(
                SpecSource.OVERRIDE,
                getattr(override, f"{side}_brand_id"),
                getattr(override, f"{side}_model_id"),
                getattr(override, f"tension_{side}"),
            ))
        if client is not None:
            layers.append(_Layer(
                SpecSource.CLIENT,
                getattr(client, f"preferred_{side}_brand_id", None),
                getattr(client, f"preferred_{side}_model_id", None),
                getattr(client, f"default_tension_{side}", None),
            ))
        if last_known is not None:
            layers.append(_Layer(
                SpecSource.HISTORY,
                getattr(last_known, f"{side}_brand_id", None),
                getattr(last_known, f"{side}_model_id"),
                getattr(last_known, f"tension_{side}"),
            ))
        return layers

    def _layer_brand(self, layer: _Layer) -> Optional[int]:
        brand = self.strings.lookup_brand(layer.brand_id)
        if brand is not None:
            return brand.id
        model = self.strings.lookup_model(layer.model_id)
        if model is not None and self.strings.lookup_brand(model.brand_id) is not None:
            return model.brand_id
        return None

    def _resolve_side(self, side: str, layers: List[_Layer], values: dict, sources: dict) -> None:
        brand_id = None
        for layer in layers:
            brand_id = self._layer_brand(layer)
            if brand_id is not None:
                values[f"{side}_brand_id"] = brand_id
                sources[f"{side}_brand_id"] = layer.source
                break

        if brand_id is not None:
            for layer in layers:
                if self.strings.model_belongs_to(layer.model_id, brand_id):
                    values[f"{side}_model_id"] = layer.model_id
                    sources[f"{side}_model_id"] = layer.source
                    break

        for layer in layers:
            tension = _positive(layer.tension)
            if tension is not None:
                values[f"tension_{side}"] = tension
                sources[f"tension_{side}"] = layer.source
                break

    def resolve(
        self,
        client,
        racquet,
        override: Optional[SpecOverride] = None,
        last_known=None,
    ) -> EffectiveSpec:
        """Resolve the spec for ``racquet``.

        ``last_known`` is the racquet's last known setup (see ``jobs.history``);
        one recorded for another racquet is ignored.
        """
        if last_known is not None and racquet is not None and last_known.racquet_id not in (None, racquet.id):
            last_known = None

        values: dict = {}
        sources: dict = {}
        for side in SIDES:
            self._resolve_side(side, self._layers(side, client, override, last_known), values, sources)

        price_layers = (
            (SpecSource.OVERRIDE, override.price if override else None),
            (SpecSource.HISTORY, last_known.price if last_known else None),
        )
        for source, price in price_layers:
            if price is not None and price >= 0:
                values["price"] = float(price)
                sources["price"] = source
                break

        return EffectiveSpec(**values, sources=sources)
