from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from stringdesk.database import get_db
from stringdesk.auth.models import User
from stringdesk.auth.dependencies import get_current_active_user
from stringdesk.stringers.schemas import StringerResponse
from stringdesk.stringers.service import StringerService

router = APIRouter(prefix="/stringers", tags=["stringers"])


@router.get("", response_model=List[StringerResponse])
async def list_stringers(
    q: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return await StringerService(db).list_stringers(q, skip, limit)


@router.get("/{stringer_id}", response_model=StringerResponse)
async def get_stringer(
    stringer_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return await StringerService(db).get_stringer(stringer_id)
