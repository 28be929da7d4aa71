import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stringdesk.auth import models, schemas, security

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[models.User]:
        result = await self.db.execute(select(models.User).where(models.User.email == email))
        return result.scalars().first()

    async def authenticate_user(self, email: str, password: str) -> Optional[models.User]:
        user = await self.get_user_by_email(email)
        if not user:
            return None
        if not security.verify_password(password, user.hashed_password):
            return None
        return user

    async def register_user(self, register_data: schemas.UserRegister) -> models.User:
        existing_user = await self.get_user_by_email(register_data.email)
        if existing_user:
            raise ValueError("User with this email already exists")

        user = models.User(
            email=register_data.email,
            hashed_password=security.get_password_hash(register_data.password),
            full_name=register_data.full_name,
            role=register_data.role,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Registered {user.role.value} account {user.id}")
        return user
