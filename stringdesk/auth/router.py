from datetime import timedelta
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from stringdesk.database import get_db
from stringdesk.auth import schemas, models, security
from stringdesk.auth.service import AuthService
from stringdesk.config import settings

from stringdesk.auth.dependencies import get_current_active_user

router = APIRouter()


def _issue_token(user: models.User) -> dict:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = security.create_access_token(
        data={"sub": user.email, "role": user.role.value},
        expires_delta=access_token_expires
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.post("/login", response_model=schemas.Token)
async def login_access_token(
    login_data: schemas.UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    JSON login endpoint, accepts {"email": "...", "password": "..."}
    """
    auth_service = AuthService(db)
    user = await auth_service.authenticate_user(login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect email or password",
        )
    elif not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    return _issue_token(user)

@router.post("/register", response_model=schemas.Token)
async def register(
    register_data: schemas.UserRegister,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a stringer or customer account and log it in.
    """
    auth_service = AuthService(db)
    try:
        user = await auth_service.register_user(register_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _issue_token(user)

@router.get("/me", response_model=schemas.UserResponse)
async def read_me(current_user: models.User = Depends(get_current_active_user)):
    return current_user
