"""In-memory catalog snapshot.

Brand and model reference data is loaded once per process and never mutated.
A missing id is an ordinary outcome (seed data may have been retired), so
every lookup returns ``None`` rather than raising.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Iterator, Optional, Tuple

from stringdesk.shared.models import utcnow

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class CatalogEntry:
    id: int
    name: str
    brand_id: Optional[int] = None


class BrandModels:
    """Restartable view over the models of one brand, ordered by name."""

    def __init__(self, ordered: Tuple[CatalogEntry, ...], brand_id: Optional[int]):
        self._ordered = ordered
        self._brand_id = brand_id

    def __iter__(self) -> Iterator[CatalogEntry]:
        return (m for m in self._ordered if m.brand_id == self._brand_id)

    def __repr__(self) -> str:
        return f"BrandModels(brand_id={self._brand_id!r})"


class CatalogIndex:
    def __init__(self, brands: Iterable[CatalogEntry], models: Iterable[CatalogEntry]):
        self._brands: Dict[int, CatalogEntry] = {b.id: b for b in brands}
        self._models: Dict[int, CatalogEntry] = {m.id: m for m in models}
        self._ordered_models = tuple(
            sorted(self._models.values(), key=lambda m: (m.name.casefold(), m.id))
        )
        self._models_by_name: Dict[str, CatalogEntry] = {}
        for model in self._ordered_models:
            self._models_by_name.setdefault(_name_key(model.name), model)

    def lookup_brand(self, brand_id: Optional[int]) -> Optional[CatalogEntry]:
        if brand_id is None:
            return None
        return self._brands.get(brand_id)

    def lookup_model(self, model_id: Optional[int]) -> Optional[CatalogEntry]:
        if model_id is None:
            return None
        return self._models.get(model_id)

    def models_for_brand(self, brand_id: Optional[int]) -> BrandModels:
        return BrandModels(self._ordered_models, brand_id)

    def brands(self) -> list[CatalogEntry]:
        return sorted(self._brands.values(), key=lambda b: (b.name.casefold(), b.id))

    def find_model_by_name(self, name: Optional[str]) -> Optional[CatalogEntry]:
        """Case-insensitive exact match on the model name, or on "Brand Model"."""
        if not name:
            return None
        key = _name_key(name)
        model = self._models_by_name.get(key)
        if model:
            return model
        for candidate in self._ordered_models:
            brand = self._brands.get(candidate.brand_id)
            if brand and _name_key(f"{brand.name} {candidate.name}") == key:
                return candidate
        return None

    def model_belongs_to(self, model_id: Optional[int], brand_id: Optional[int]) -> bool:
        model = self.lookup_model(model_id)
        return model is not None and brand_id is not None and model.brand_id == brand_id

    def label(self, model_id: Optional[int]) -> str:
        model = self.lookup_model(model_id)
        if not model:
            return UNKNOWN_LABEL
        brand = self.lookup_brand(model.brand_id)
        return f"{brand.name} {model.name}" if brand else model.name

    def __len__(self) -> int:
        return len(self._models)


def _name_key(name: str) -> str:
    return " ".join(name.split()).casefold()


@dataclass(frozen=True)
class Catalog:
    """Session-wide snapshot of both reference catalogs."""
    strings: CatalogIndex
    racquets: CatalogIndex
    loaded_at: datetime = field(default_factory=utcnow)
