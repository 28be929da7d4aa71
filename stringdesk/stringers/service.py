from typing import List, Optional
from uuid import UUID
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from stringdesk.auth.models import User, UserRole


class StringerService:
    """Directory of active stringer accounts, as customers browse it."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _stringers(self):
        return select(User).where(User.role == UserRole.STRINGER, User.is_active.is_(True))

    async def list_stringers(self, q: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[User]:
        query = self._stringers()
        if q:
            pattern = f"%{q.strip()}%"
            query = query.where(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
        query = query.order_by(User.full_name, User.email).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_stringer(self, stringer_id: UUID) -> User:
        result = await self.db.execute(self._stringers().where(User.id == stringer_id))
        stringer = result.scalar_one_or_none()
        if not stringer:
            raise HTTPException(status_code=404, detail="Stringer not found")
        return stringer
