from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from stringdesk.database import get_db
from stringdesk.config import settings
from stringdesk.auth import security, models

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[security.ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(models.User).where(models.User.email == email))
    user = result.scalars().first()

    if user is None:
        raise credentials_exception
    return user


async def get_current_active_user(
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


async def get_current_stringer(
    current_user: models.User = Depends(get_current_active_user),
) -> models.User:
    """Restrict an endpoint to service-provider accounts."""
    if not current_user.is_stringer:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Stringer account required",
        )
    return current_user


async def get_catalog_admin(
    current_user: models.User = Depends(get_current_stringer),
) -> models.User:
    if current_user.email.lower() not in {email.lower() for email in settings.CATALOG_ADMIN_EMAILS}:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Catalog admin required",
        )
    return current_user
