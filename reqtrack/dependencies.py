"""FastAPI dependencies: DB session, current user and the request's tracker."""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from reqtrack.database import get_db
from reqtrack.models import User
from reqtrack.services.identity import resolve_user
from reqtrack.services.tracker import RequestTracker

__all__ = ["get_db", "get_current_user", "get_request_tracker"]

_bearer_scheme = HTTPBearer(
    scheme_name="BearerAuth",
    description="JWT access token from **POST /api/auth/login**.",
    auto_error=False,
)
_api_key_header = APIKeyHeader(
    name="X-API-Key",
    scheme_name="ApiKeyAuth",
    auto_error=False,
)

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    bearer: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),  # noqa: B008
    api_key: str | None = Security(_api_key_header),  # noqa: B008
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> User:
    """Return the user behind the Bearer JWT or ``X-API-Key``, else ``401``."""
    user = await resolve_user(
        db,
        bearer=bearer.credentials if bearer is not None else None,
        api_key=api_key,
    )
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user


def get_request_tracker(request: Request) -> RequestTracker:
    """Return the tracker the middleware bound to this request.

    Only available on routes inside the tracked path prefix.
    """
    tracker: RequestTracker | None = getattr(request.state, "tracker", None)
    if tracker is None:
        raise RuntimeError(f"{request.url.path} is not a tracked route")
    return tracker
