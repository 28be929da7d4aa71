import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from stringdesk.catalog.index import Catalog
from stringdesk.clients.models import Client
from stringdesk.clients.service import ClientService
from stringdesk.racquets.models import Racquet
from stringdesk.racquets.schemas import RacquetCreate, RacquetUpdate

logger = logging.getLogger(__name__)


class RacquetService:
    def __init__(self, db: AsyncSession, catalog: Optional[Catalog] = None):
        self.db = db
        self.catalog = catalog

    def _validate_frame(self, brand_id: int, model_id: int) -> None:
        if self.catalog is None:
            return
        racquets = self.catalog.racquets
        if racquets.lookup_brand(brand_id) is None:
            raise ValueError(f"Unknown racquet brand {brand_id}")
        model = racquets.lookup_model(model_id)
        if model is None:
            raise ValueError(f"Unknown racquet model {model_id}")
        if model.brand_id != brand_id:
            raise ValueError(f"Racquet model {model_id} does not belong to brand {brand_id}")

    async def create_racquet(self, racquet_in: RacquetCreate, stringer_id: UUID) -> Racquet:
        # ownership check, raises 404 for a foreign client
        await ClientService(self.db).get_client(racquet_in.client_id, stringer_id)
        self._validate_frame(racquet_in.brand_id, racquet_in.model_id)

        racquet = Racquet(**racquet_in.model_dump(), is_active=True)
        self.db.add(racquet)
        await self.db.commit()
        await self.db.refresh(racquet)
        return racquet

    async def list_racquets(
        self,
        stringer_id: UUID,
        client_id: Optional[UUID] = None,
        include_inactive: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Racquet]:
        query = select(Racquet).join(Client, Racquet.client_id == Client.id).where(Client.stringer_id == stringer_id)
        if client_id:
            query = query.where(Racquet.client_id == client_id)
        if not include_inactive:
            query = query.where(Racquet.is_active == True)
        query = query.order_by(Racquet.created_at.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_racquet(self, racquet_id: UUID, stringer_id: UUID) -> Racquet:
        query = (
            select(Racquet)
            .join(Client, Racquet.client_id == Client.id)
            .where(Racquet.id == racquet_id, Client.stringer_id == stringer_id)
        )
        result = await self.db.execute(query)
        racquet = result.scalar_one_or_none()
        if not racquet:
            raise HTTPException(status_code=404, detail="Racquet not found")
        return racquet

    async def find_accessible(self, racquet_id: UUID, user_id: UUID) -> Optional[Racquet]:
        """The racquet if the user strings for its client or is that client's customer account."""
        query = (
            select(Racquet)
            .join(Client, Racquet.client_id == Client.id)
            .where(
                Racquet.id == racquet_id,
                (Client.stringer_id == user_id) | (Client.customer_user_id == user_id),
            )
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_customer(self, customer_user_id: UUID) -> List[Racquet]:
        query = (
            select(Racquet)
            .join(Client, Racquet.client_id == Client.id)
            .where(Client.customer_user_id == customer_user_id, Racquet.is_active == True)
            .order_by(Racquet.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_racquet(self, racquet_id: UUID, stringer_id: UUID, racquet_in: RacquetUpdate) -> Racquet:
        racquet = await self.get_racquet(racquet_id, stringer_id)

        update_data = racquet_in.model_dump(exclude_unset=True)
        if "brand_id" in update_data or "model_id" in update_data:
            self._validate_frame(
                update_data.get("brand_id", racquet.brand_id),
                update_data.get("model_id", racquet.model_id),
            )
        for field, value in update_data.items():
            setattr(racquet, field, value)

        await self.db.commit()
        await self.db.refresh(racquet)
        return racquet

    async def deactivate_racquet(self, racquet_id: UUID, stringer_id: UUID) -> Racquet:
        racquet = await self.get_racquet(racquet_id, stringer_id)
        racquet.is_active = False
        await self.db.commit()
        await self.db.refresh(racquet)
        logger.info(f"Racquet {racquet_id} deactivated")
        return racquet
