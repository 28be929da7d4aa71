import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_current_active_user, get_current_stringer
from stringdesk.catalog.index import Catalog
from stringdesk.catalog.service import get_catalog
from stringdesk.clients.service import ClientService
from stringdesk.jobs.schemas import EffectiveSpecResponse
from stringdesk.jobs.service import JobService
from stringdesk.racquets import descriptor as codec
from stringdesk.racquets.schemas import (
    QRCodeResponse,
    RacquetCreate,
    RacquetResponse,
    RacquetUpdate,
    ScanRequest,
    ScanResponse,
)
from stringdesk.racquets.service import RacquetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/racquets", tags=["racquets"])


@router.post("", response_model=RacquetResponse)
async def create_racquet(
    racquet: RacquetCreate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = RacquetService(db, catalog)
    try:
        return await service.create_racquet(racquet, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[RacquetResponse])
async def list_racquets(
    client_id: Optional[UUID] = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    service = RacquetService(db)
    return await service.list_racquets(current_user.id, client_id, include_inactive, skip, limit)


@router.post("/scan", response_model=ScanResponse)
async def scan_racquet_code(
    scan: ScanRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Decode a scanned QR payload. Unrelated codes come back with
    recognized=false; a recognized code is refreshed against current records.
    """
    decoded = codec.decode(scan.payload)
    if isinstance(decoded, codec.InvalidDescriptor):
        logger.info(f"Unrecognized code scanned: {decoded.reason}")
        return ScanResponse(recognized=False, message=decoded.message, reason=decoded.reason)

    response = ScanResponse(recognized=True, descriptor=decoded)
    racquet = await RacquetService(db).find_accessible(decoded.racquet_id, current_user.id)
    if racquet is None:
        response.message = "Racquet not found in your records"
        return response

    jobs = JobService(db, catalog)
    latest = await jobs.latest_snapshot(racquet)
    response.racquet = RacquetResponse.model_validate(racquet)
    response.latest_snapshot = latest
    response.snapshot_is_current = latest == decoded.stringing_snapshot
    if current_user.is_stringer:
        client = await ClientService(db).get_client(racquet.client_id, current_user.id)
        spec = await jobs.spec_for_new_job(client, racquet)
        response.suggested_spec = EffectiveSpecResponse.from_spec(spec, catalog.strings)
    return response


@router.get("/{racquet_id}", response_model=RacquetResponse)
async def get_racquet(
    racquet_id: UUID,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    service = RacquetService(db)
    return await service.get_racquet(racquet_id, current_user.id)


@router.get("/{racquet_id}/qr", response_model=QRCodeResponse)
async def get_racquet_qr(
    racquet_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    racquet = await RacquetService(db).find_accessible(racquet_id, current_user.id)
    if racquet is None:
        raise HTTPException(status_code=404, detail="Racquet not found")
    snapshot = await JobService(db, catalog).latest_snapshot(racquet)
    descriptor = codec.build_descriptor(racquet, catalog, snapshot)
    return {"payload": codec.encode(descriptor), "descriptor": descriptor}


@router.patch("/{racquet_id}", response_model=RacquetResponse)
async def update_racquet(
    racquet_id: UUID,
    racquet: RacquetUpdate,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    service = RacquetService(db, catalog)
    try:
        return await service.update_racquet(racquet_id, current_user.id, racquet)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{racquet_id}", response_model=RacquetResponse)
async def deactivate_racquet(
    racquet_id: UUID,
    current_user: User = Depends(get_current_stringer),
    db: AsyncSession = Depends(get_db),
):
    """
    Soft delete: the racquet is hidden from active lists but its job history stays.
    """
    service = RacquetService(db)
    return await service.deactivate_racquet(racquet_id, current_user.id)
