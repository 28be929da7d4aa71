from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_current_active_user
from stringdesk.catalog.index import Catalog
from stringdesk.catalog.service import get_catalog
from stringdesk.customers.schemas import CustomerRacquetResponse
from stringdesk.jobs.service import JobService
from stringdesk.racquets.schemas import RacquetResponse
from stringdesk.racquets.service import RacquetService

router = APIRouter(prefix="/me", tags=["customers"])


@router.get("/racquets", response_model=List[CustomerRacquetResponse])
async def list_my_racquets(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    """Racquets of every client record linked to the signed-in customer account."""
    jobs = JobService(db, catalog)
    enriched = []
    for racquet in await RacquetService(db).list_for_customer(current_user.id):
        brand = catalog.racquets.lookup_brand(racquet.brand_id)
        model = catalog.racquets.lookup_model(racquet.model_id)
        enriched.append(CustomerRacquetResponse(
            **RacquetResponse.model_validate(racquet).model_dump(),
            brand_name=brand.name if brand else None,
            model_name=model.name if model else None,
            last_stringing=await jobs.latest_snapshot(racquet),
        ))
    return enriched
