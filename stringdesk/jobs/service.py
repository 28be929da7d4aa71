import logging
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from stringdesk.catalog.index import Catalog
from stringdesk.clients.service import ClientService
from stringdesk.inventory.service import InventoryService
from stringdesk.jobs import lifecycle
from stringdesk.jobs.guard import TransitionGuard, transition_guard
from stringdesk.jobs.history import LastKnownSpecProvider, override_from_detail
from stringdesk.jobs.lifecycle import AdvanceResult, Rejected, RejectionReason
from stringdesk.jobs.models import Job, JobStatus, JobStringingDetail, JobType
from stringdesk.jobs.resolver import EffectiveSpec, PreferenceResolver, SpecOverride
from stringdesk.jobs.schemas import JobCreate, JobUpdate, StringingSpecIn
from stringdesk.racquets.descriptor import StringingSnapshot
from stringdesk.racquets.service import RacquetService
from stringdesk.shared.models import utcnow

logger = logging.getLogger(__name__)


class JobService:
    def __init__(self, db: AsyncSession, catalog: Catalog, guard: TransitionGuard = transition_guard):
        self.db = db
        self.catalog = catalog
        self.guard = guard
        self.resolver = PreferenceResolver(catalog.strings)
        self.history = LastKnownSpecProvider(db, catalog)

    async def _load_pair(self, client_id: UUID, racquet_id: UUID, stringer_id: UUID):
        client = await ClientService(self.db).get_client(client_id, stringer_id)
        racquet = await RacquetService(self.db).get_racquet(racquet_id, stringer_id)
        if racquet.client_id != client.id:
            raise ValueError("Racquet does not belong to this client")
        return client, racquet

    def _validate_choice(self, choice: StringingSpecIn) -> None:
        """Explicit choices must name catalog entries and keep each model under its brand."""
        strings = self.catalog.strings
        for side in ("main", "cross"):
            brand_id = getattr(choice, f"{side}_brand_id")
            model_id = getattr(choice, f"{side}_string_model_id")
            if brand_id is not None and strings.lookup_brand(brand_id) is None:
                raise ValueError(f"Unknown {side} string brand {brand_id}")
            if model_id is not None:
                model = strings.lookup_model(model_id)
                if model is None:
                    raise ValueError(f"Unknown {side} string model {model_id}")
                if brand_id is not None and model.brand_id != brand_id:
                    raise ValueError(f"{side.capitalize()} string model {model_id} does not belong to brand {brand_id}")

    async def preview_spec(
        self,
        stringer_id: UUID,
        client_id: UUID,
        racquet_id: UUID,
        override: Optional[SpecOverride] = None,
    ) -> EffectiveSpec:
        client, racquet = await self._load_pair(client_id, racquet_id, stringer_id)
        last_known = await self.history.latest(racquet)
        return self.resolver.resolve(client, racquet, override, last_known)

    async def spec_for_new_job(self, client, racquet) -> EffectiveSpec:
        last_known = await self.history.latest(racquet)
        return self.resolver.resolve(client, racquet, None, last_known)

    async def create_job(self, job_in: JobCreate, stringer_id: UUID) -> Job:
        client, racquet = await self._load_pair(job_in.client_id, job_in.racquet_id, stringer_id)
        if not racquet.is_active:
            raise ValueError("Racquet is inactive")

        choice = job_in.stringing
        if job_in.job_type != JobType.STRINGING and choice is not None and not choice.is_empty():
            raise ValueError("Stringing details are only allowed on stringing jobs")

        job = Job(
            client_id=client.id,
            racquet_id=racquet.id,
            stringer_id=stringer_id,
            job_type=job_in.job_type,
            job_status=JobStatus.PENDING,
            job_notes=job_in.job_notes,
            due_date=job_in.due_date,
        )
        if job_in.job_type == JobType.STRINGING:
            choice = choice or StringingSpecIn()
            self._validate_choice(choice)
            job.stringing_detail = JobStringingDetail(
                main_brand_id=choice.main_brand_id,
                cross_brand_id=choice.cross_brand_id,
                main_string_model_id=choice.main_string_model_id,
                cross_string_model_id=choice.cross_string_model_id,
                tension_main=choice.tension_main,
                tension_cross=choice.tension_cross,
                price=choice.price,
            )
            racquet.last_stringing_date = utcnow()

        self.db.add(job)
        await self.db.commit()
        await self.db.refresh(job)
        logger.info(f"Created {job.job_type.value} job {job.id} for racquet {racquet.id}")
        return job

    async def list_jobs(
        self,
        stringer_id: UUID,
        status: Optional[JobStatus] = None,
        client_id: Optional[UUID] = None,
        racquet_id: Optional[UUID] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Job]:
        query = select(Job).where(Job.stringer_id == stringer_id)
        if status:
            query = query.where(Job.job_status == status)
        if client_id:
            query = query.where(Job.client_id == client_id)
        if racquet_id:
            query = query.where(Job.racquet_id == racquet_id)
        query = query.order_by(desc(Job.created_at)).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_job(self, job_id: UUID, stringer_id: UUID) -> Job:
        result = await self.db.execute(
            select(Job).where(Job.id == job_id, Job.stringer_id == stringer_id)
        )
        job = result.scalar_one_or_none()
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        return job

    async def update_job(self, job_id: UUID, stringer_id: UUID, job_in: JobUpdate) -> Job:
        job = await self.get_job(job_id, stringer_id)
        for field, value in job_in.model_dump(exclude_unset=True).items():
            setattr(job, field, value)
        job.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(job)
        return job

    async def effective_spec(self, job: Job) -> EffectiveSpec:
        """Read-time spec of a stringing job: its own choices over the client's and the racquet's earlier setup."""
        if job.job_type != JobType.STRINGING:
            raise ValueError("Job is not a stringing job")
        client = await ClientService(self.db).get_client(job.client_id, job.stringer_id)
        racquet = await RacquetService(self.db).get_racquet(job.racquet_id, job.stringer_id)
        last_known = await self.history.latest(racquet, before=job.created_at, exclude_job_id=job.id)
        return self.resolver.resolve(client, racquet, override_from_detail(job.stringing_detail), last_known)

    async def latest_snapshot(self, racquet) -> Optional[StringingSnapshot]:
        last_known = await self.history.latest(racquet)
        if last_known is None or last_known.source != "job":
            return None
        return StringingSnapshot(
            job_id=last_known.job_id,
            main_string_model_id=last_known.main_model_id,
            cross_string_model_id=last_known.cross_model_id,
            tension_main=last_known.tension_main,
            tension_cross=last_known.tension_cross,
            price=last_known.price,
            recorded_at=last_known.recorded_at,
        )

    async def advance(
        self, job_id: UUID, stringer_id: UUID, target: Optional[JobStatus] = None
    ) -> Tuple[Job, AdvanceResult]:
        with self.guard.hold(job_id) as claimed:
            job = await self.get_job(job_id, stringer_id)
            if not claimed:
                return job, Rejected(
                    RejectionReason.IN_FLIGHT,
                    job.job_status,
                    "A status change for this job is already in progress",
                )

            result = lifecycle.advance(job, target)
            if isinstance(result, Rejected):
                logger.info(f"Rejected advance of job {job_id}: {result.message}")
                return job, result

            result.apply(job)
            if result.first_completion and job.job_type == JobType.STRINGING:
                spec = await self.effective_spec(job)
                await InventoryService(self.db).consume_sets(
                    stringer_id, (spec.main_model_id, spec.cross_model_id)
                )

            await self.db.commit()
            await self.db.refresh(job)
            logger.info(f"Job {job_id} moved {result.from_status.value} -> {result.to_status.value}")
            return job, result
