import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from stringdesk.auth.models import User, UserRole
from stringdesk.catalog.index import Catalog
from stringdesk.clients.models import Client
from stringdesk.clients.schemas import ClientCreate, ClientUpdate
from stringdesk.jobs.models import Job, JobStringingDetail
from stringdesk.racquets.models import Racquet

logger = logging.getLogger(__name__)

PREFERENCE_SIDES = ("main", "cross")


class ClientService:
    def __init__(self, db: AsyncSession, catalog: Optional[Catalog] = None):
        self.db = db
        self.catalog = catalog

    def _validate_preferences(self, values: dict) -> None:
        """Reject preference ids the string catalog does not know, or a model outside its brand."""
        if self.catalog is None:
            return
        strings = self.catalog.strings
        for side in PREFERENCE_SIDES:
            brand_id = values.get(f"preferred_{side}_brand_id")
            model_id = values.get(f"preferred_{side}_model_id")
            if brand_id is not None and strings.lookup_brand(brand_id) is None:
                raise ValueError(f"Unknown {side} string brand {brand_id}")
            if model_id is not None:
                model = strings.lookup_model(model_id)
                if model is None:
                    raise ValueError(f"Unknown {side} string model {model_id}")
                if brand_id is not None and model.brand_id != brand_id:
                    raise ValueError(f"{side.capitalize()} string model {model_id} does not belong to brand {brand_id}")

    async def _resolve_customer(self, email: Optional[str]) -> Optional[UUID]:
        if not email:
            return None
        result = await self.db.execute(
            select(User).where(User.email == email, User.role == UserRole.CUSTOMER)
        )
        customer = result.scalars().first()
        if not customer:
            raise ValueError(f"No customer account registered for {email}")
        return customer.id

    async def create_client(self, client_in: ClientCreate, stringer_id: UUID) -> Client:
        data = client_in.model_dump(exclude={"customer_email"})
        self._validate_preferences(data)
        db_client = Client(
            **data,
            stringer_id=stringer_id,
            customer_user_id=await self._resolve_customer(client_in.customer_email),
        )
        self.db.add(db_client)
        await self.db.commit()
        await self.db.refresh(db_client)
        return db_client

    async def list_clients(
        self, stringer_id: UUID, skip: int = 0, limit: int = 100, search: Optional[str] = None
    ) -> List[Client]:
        query = select(Client).where(Client.stringer_id == stringer_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                Client.full_name.ilike(pattern),
                Client.email.ilike(pattern),
                Client.phone.ilike(pattern),
            ))
        query = query.order_by(Client.full_name).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_client(self, client_id: UUID, stringer_id: UUID) -> Client:
        query = select(Client).where(Client.id == client_id, Client.stringer_id == stringer_id)
        result = await self.db.execute(query)
        client = result.scalar_one_or_none()
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    async def update_client(self, client_id: UUID, stringer_id: UUID, client_in: ClientUpdate) -> Client:
        client = await self.get_client(client_id, stringer_id)

        update_data = client_in.model_dump(exclude_unset=True, exclude={"customer_email"})
        merged = {
            f"preferred_{side}_{kind}_id": update_data.get(
                f"preferred_{side}_{kind}_id", getattr(client, f"preferred_{side}_{kind}_id")
            )
            for side in PREFERENCE_SIDES
            for kind in ("brand", "model")
        }
        self._validate_preferences(merged)

        for field, value in update_data.items():
            setattr(client, field, value)
        if "customer_email" in client_in.model_fields_set:
            client.customer_user_id = await self._resolve_customer(client_in.customer_email)

        await self.db.commit()
        await self.db.refresh(client)
        return client

    async def delete_client(self, client_id: UUID, stringer_id: UUID) -> None:
        client = await self.get_client(client_id, stringer_id)
        job_ids = select(Job.id).where(Job.client_id == client.id)
        await self.db.execute(delete(JobStringingDetail).where(JobStringingDetail.job_id.in_(job_ids)))
        await self.db.execute(delete(Job).where(Job.client_id == client.id))
        await self.db.execute(delete(Racquet).where(Racquet.client_id == client.id))
        await self.db.delete(client)
        await self.db.commit()
        logger.info(f"Deleted client {client_id} with its racquets and jobs")
