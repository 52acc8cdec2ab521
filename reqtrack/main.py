import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from reqtrack.api.health import router as health_router
from reqtrack.api.router import api_router
from reqtrack.config import settings
from reqtrack.database import engine
from reqtrack.middleware.error_handler import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from reqtrack.middleware.track_requests import TrackRequestsMiddleware

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_OPENAPI_TAGS = [
    {"name": "Health", "description": "Health check endpoints (not tracked)"},
    {"name": "Auth", "description": "Authentication"},
    {"name": "Users", "description": "Tracked user endpoints"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    # Startup: verify database connection
    async with engine.connect() as conn:
        await conn.run_sync(lambda _: None)
    yield
    # Shutdown: dispose all connections
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Records every request on the /api route group to the logs table",
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
    openapi_tags=_OPENAPI_TAGS,
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, unhandled_exception_handler)

# ---------------------------------------------------------------------------
# Middleware (Starlette LIFO: last add_middleware call runs outermost)
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Outermost: CORS preflights on the tracked prefix are recorded too.
app.add_middleware(TrackRequestsMiddleware, path_prefix=settings.tracking_path_prefix)

app.include_router(health_router)
app.include_router(api_router)
