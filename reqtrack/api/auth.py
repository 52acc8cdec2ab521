"""Authentication endpoint: exchange email and password for an access token."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reqtrack.config import settings
from reqtrack.dependencies import get_db
from reqtrack.models import User
from reqtrack.schemas.auth import LoginRequest, TokenResponse
from reqtrack.schemas.common import ErrorResponse
from reqtrack.services.auth import create_access_token, verify_password

router = APIRouter(prefix="/auth", tags=["Auth"])

_INVALID_CREDENTIALS = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid email or password",
    headers={"WWW-Authenticate": "Bearer"},
)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        422: {"model": ErrorResponse, "description": "Request validation failed"},
    },
)
async def login(
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Authenticate with email and password and return a JWT access token."""
    result = await db.execute(select(User).where(User.email == body.email))
    user: User | None = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise _INVALID_CREDENTIALS
    if not verify_password(body.password, user.password_hash):
        raise _INVALID_CREDENTIALS

    return TokenResponse(
        access_token=create_access_token(str(user.id), user.email),
        expires_in=settings.access_token_expire_minutes * 60,
    )
