"""Tracked user-facing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from reqtrack.dependencies import get_current_user
from reqtrack.models import User
from reqtrack.schemas.auth import UserResponse

router = APIRouter(tags=["Users"])


@router.get("/user", response_class=PlainTextResponse)
async def user() -> str:
    return "hello world"


@router.get("/me", response_model=UserResponse)
async def me(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Return the authenticated user's profile."""
    return current_user
