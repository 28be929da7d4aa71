"""A racquet's last known stringing setup.

Racquets that predate job tracking often carry their setup in free-text
``stringing_notes``. Those notes are parsed into a starting point, and every
stringing job since then resolves on top of the one before it.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stringdesk.catalog.index import Catalog, CatalogIndex
from stringdesk.clients.models import Client
from stringdesk.jobs.models import Job, JobStringingDetail, JobType
from stringdesk.jobs.resolver import PreferenceResolver, SpecOverride

logger = logging.getLogger(__name__)

KG_TO_LBS = 2.20462
MIN_TENSION_LBS = 10
MAX_TENSION_LBS = 90

_SIDE_RE = re.compile(
    r"\b(?P<side>mains?|cross(?:es)?)\b\s*[:=\-]?\s*"
    r"(?P<body>.*?)(?=\b(?:mains?|cross(?:es)?)\b|[;|\n]|$)",
    re.IGNORECASE,
)
_LEADING_TENSION_RE = re.compile(r"^\s*(?P<value>\d{1,2}(?:\.\d+)?)\s*(?P<unit>lbs?|kg|#)?", re.IGNORECASE)
_UNIT_TENSION_RE = re.compile(r"(?<![\d.])(?P<value>\d{2}(?:\.\d+)?)\s*(?P<unit>lbs?|kg|#)(?![a-z])", re.IGNORECASE)
_PAIR_RE = re.compile(
    r"(?<![\d./])(?P<main>\d{2}(?:\.\d+)?)\s*/\s*(?P<cross>\d{2}(?:\.\d+)?)(?![\d.]|\s*/\s*\d)\s*(?P<unit>lbs?|kg)?",
    re.IGNORECASE,
)
_PRICE_RE = re.compile(r"\$\s*(?P<price>\d+(?:\.\d{1,2})?)")


@dataclass(frozen=True)
class LastKnownSpec:
    source: str  # "job" | "notes"
    racquet_id: Optional[UUID] = None
    job_id: Optional[UUID] = None
    main_model_id: Optional[int] = None
    cross_model_id: Optional[int] = None
    main_brand_id: Optional[int] = None
    cross_brand_id: Optional[int] = None
    tension_main: Optional[float] = None
    tension_cross: Optional[float] = None
    price: Optional[float] = None
    recorded_at: Optional[datetime] = None


def _to_lbs(value: str, unit: Optional[str]) -> Optional[float]:
    tension = float(value)
    if unit and unit.lower() == "kg":
        tension = round(tension * KG_TO_LBS, 1)
    if MIN_TENSION_LBS <= tension <= MAX_TENSION_LBS:
        return tension
    return None


def _parse_side(body: str, strings: CatalogIndex) -> tuple[Optional[int], Optional[float]]:
    name, tension = body, None
    if "@" in body:
        name, _, rest = body.partition("@")
        match = _LEADING_TENSION_RE.match(rest)
        if match:
            tension = _to_lbs(match["value"], match["unit"])
    else:
        match = _UNIT_TENSION_RE.search(body)
        if match:
            tension = _to_lbs(match["value"], match["unit"])
            name = body[:match.start()] + body[match.end():]
        else:
            match = _LEADING_TENSION_RE.fullmatch(body.strip())
            if match:
                tension = _to_lbs(match["value"], match["unit"])
                name = ""

    name = name.strip(" \t,.:-")
    model = strings.find_model_by_name(name) if name else None
    return (model.id if model else None), tension


def _fallback_tensions(notes: str) -> tuple[Optional[float], Optional[float]]:
    """Tensions from notes that do not name a side.

    A tension with a unit beats a bare ``55/53``, which might as well be a date.
    """
    pairs = list(_PAIR_RE.finditer(notes))
    for pair in pairs:
        if pair["unit"]:
            main, cross = _to_lbs(pair["main"], pair["unit"]), _to_lbs(pair["cross"], pair["unit"])
            if main is not None and cross is not None:
                return main, cross
    for single in _UNIT_TENSION_RE.finditer(notes):
        tension = _to_lbs(single["value"], single["unit"])
        if tension is not None:
            return tension, tension
    for pair in pairs:
        main, cross = _to_lbs(pair["main"], None), _to_lbs(pair["cross"], None)
        if main is not None and cross is not None:
            return main, cross
    return None, None


def parse_stringing_notes(
    notes: Optional[str],
    strings: CatalogIndex,
    racquet_id: Optional[UUID] = None,
) -> Optional[LastKnownSpec]:
    """Pull strings, tensions and price out of free-text notes.

    Recognizes ``Mains: RPM Blast @ 52 lbs; Crosses: Synthetic Gut @ 50``,
    the ``55/53`` shorthand, a lone ``54 lbs`` (both sides), ``kg`` tensions
    and ``$35`` prices. Returns None when nothing is recognized.
    """
    if not notes or not notes.strip():
        return None

    fields = {"main_model_id": None, "cross_model_id": None, "tension_main": None, "tension_cross": None}
    for match in _SIDE_RE.finditer(notes):
        side = "main" if match["side"].lower().startswith("main") else "cross"
        model_id, tension = _parse_side(match["body"], strings)
        if fields[f"{side}_model_id"] is None:
            fields[f"{side}_model_id"] = model_id
        if fields[f"tension_{side}"] is None:
            fields[f"tension_{side}"] = tension

    if fields["tension_main"] is None and fields["tension_cross"] is None:
        fields["tension_main"], fields["tension_cross"] = _fallback_tensions(notes)

    price_match = _PRICE_RE.search(notes)
    price = float(price_match["price"]) if price_match else None

    if all(value is None for value in fields.values()) and price is None:
        return None
    return LastKnownSpec(source="notes", racquet_id=racquet_id, price=price, **fields)


def override_from_detail(detail: Optional[JobStringingDetail]) -> Optional[SpecOverride]:
    if detail is None:
        return None
    return SpecOverride(
        main_brand_id=detail.main_brand_id,
        main_model_id=detail.main_string_model_id,
        tension_main=detail.tension_main,
        cross_brand_id=detail.cross_brand_id,
        cross_model_id=detail.cross_string_model_id,
        tension_cross=detail.tension_cross,
        price=detail.price,
    )


class LastKnownSpecProvider:
    """Replays a racquet's stringing jobs, oldest first, on top of its notes.

    Each job resolves exactly as ``GET /jobs/{id}/spec`` does, so a field a job
    inherited from the client or from an earlier setup carries on to the next.
    """

    def __init__(self, db: AsyncSession, catalog: Catalog):
        self.db = db
        self.catalog = catalog
        self.resolver = PreferenceResolver(catalog.strings)

    async def stringing_jobs(
        self,
        racquet_id: UUID,
        before: Optional[datetime] = None,
        exclude_job_id: Optional[UUID] = None,
    ) -> List[Job]:
        query = (
            select(Job)
            .join(JobStringingDetail, JobStringingDetail.job_id == Job.id)
            .where(Job.racquet_id == racquet_id, Job.job_type == JobType.STRINGING)
        )
        if before is not None:
            query = query.where(Job.created_at < before)
        if exclude_job_id is not None:
            query = query.where(Job.id != exclude_job_id)
        result = await self.db.execute(query.order_by(Job.created_at))
        return list(result.scalars().all())

    async def latest(
        self,
        racquet,
        before: Optional[datetime] = None,
        exclude_job_id: Optional[UUID] = None,
    ) -> Optional[LastKnownSpec]:
        known = parse_stringing_notes(racquet.stringing_notes, self.catalog.strings, racquet_id=racquet.id)
        if known is not None:
            logger.debug(f"Stringing notes of racquet {racquet.id} seed its history")

        clients: Dict[UUID, Optional[Client]] = {}
        for job in await self.stringing_jobs(racquet.id, before=before, exclude_job_id=exclude_job_id):
            if job.client_id not in clients:
                clients[job.client_id] = await self.db.get(Client, job.client_id)
            spec = self.resolver.resolve(
                clients[job.client_id], racquet, override_from_detail(job.stringing_detail), known
            )
            known = LastKnownSpec(
                source="job",
                racquet_id=racquet.id,
                job_id=job.id,
                main_model_id=spec.main_model_id,
                cross_model_id=spec.cross_model_id,
                main_brand_id=spec.main_brand_id,
                cross_brand_id=spec.cross_brand_id,
                tension_main=spec.tension_main,
                tension_cross=spec.tension_cross,
                price=spec.price,
                recorded_at=job.completed_date or job.created_at,
            )
        return known
