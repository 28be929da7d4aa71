from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_current_stringer
from stringdesk.catalog.index import Catalog
from stringdesk.catalog.service import get_catalog
from stringdesk.jobs.lifecycle import Rejected
from stringdesk.jobs.models import JobStatus
from stringdesk.jobs.schemas import (
    AdvanceRequest,
    EffectiveSpecResponse,
    JobCreate,
    JobResponse,
    JobUpdate,
    ResolveSpecRequest,
)
from stringdesk.jobs.service import JobService

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/resolve-spec", response_model=EffectiveSpecResponse)
async def resolve_spec(
    request: ResolveSpecRequest,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Preview the stringing spec a new job would get, to prefill the job form.
    """
    service = JobService(db, catalog)
    override = request.override.to_override() if request.override else None
    try:
        spec = await service.preview_spec(current_user.id, request.client_id, request.racquet_id, override)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return EffectiveSpecResponse.from_spec(spec, catalog.strings)


@router.post("", response_model=JobResponse)
async def create_job(
    job: JobCreate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = JobService(db, catalog)
    try:
        return await service.create_job(job, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    status: Optional[JobStatus] = None,
    client_id: Optional[UUID] = None,
    racquet_id: Optional[UUID] = None,
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = JobService(db, catalog)
    return await service.list_jobs(current_user.id, status, client_id, racquet_id, skip, limit)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = JobService(db, catalog)
    return await service.get_job(job_id, current_user.id)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    job: JobUpdate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = JobService(db, catalog)
    return await service.update_job(job_id, current_user.id, job)


@router.get("/{job_id}/spec", response_model=EffectiveSpecResponse)
async def get_job_spec(
    job_id: UUID,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = JobService(db, catalog)
    job = await service.get_job(job_id, current_user.id)
    try:
        spec = await service.effective_spec(job)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return EffectiveSpecResponse.from_spec(spec, catalog.strings)


@router.post("/{job_id}/advance", response_model=JobResponse)
async def advance_job(
    job_id: UUID,
    request: Optional[AdvanceRequest] = None,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Move the job to its next status. A rejected move returns 409 with the
    job's current status so the caller can refresh and retry.
    """
    service = JobService(db, catalog)
    target = request.target if request else None
    job, result = await service.advance(job_id, current_user.id, target)
    if isinstance(result, Rejected):
        next_status = result.next_status
        raise HTTPException(
            status_code=409,
            detail={
                "reason": result.reason.value,
                "message": result.message,
                "current_status": result.current_status.value if result.current_status else None,
                "next_status": next_status.value if next_status else None,
            },
        )
    return job
