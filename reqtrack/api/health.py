"""Health check endpoint, mounted outside the tracked route group."""

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from reqtrack.config import settings
from reqtrack.database import AsyncSessionLocal
from reqtrack.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report application and database health.  Always HTTP 200."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.warning("Health check could not reach the database", exc_info=True)
        return HealthResponse(
            status="degraded",
            database="disconnected",
            version=settings.version,
            built_by=settings.app_name,
        )

    return HealthResponse(
        status="ok",
        database="connected",
        version=settings.version,
        built_by=settings.app_name,
    )
