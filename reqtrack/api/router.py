"""Tracked route group: everything mounted here is under ``/api``."""

from fastapi import APIRouter

from reqtrack.api.auth import router as auth_router
from reqtrack.api.users import router as users_router

api_router = APIRouter(prefix="/api")
api_router.include_router(users_router)
api_router.include_router(auth_router)
