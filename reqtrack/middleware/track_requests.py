"""Request tracking middleware.

Every request under the tracked path prefix is observed by a fresh
:class:`~reqtrack.services.tracker.RequestTracker` before it is forwarded to
the application.  The tracker is bound to ``request.state.tracker`` for the
lifetime of the request and is never shared between requests.  The tracking
session is closed before the request is forwarded.

Entries a batched tracker still holds once the response is ready are
discarded with a WARNING; with one observation per request, a batch size
above one never fills.

Tracking is not isolated from the request path: if building the entry or
writing it fails, the exception propagates, the request is not forwarded and
the application's catch-all handler produces the response.
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from reqtrack.config import settings
from reqtrack.database import AsyncSessionLocal
from reqtrack.services.request_source import StarletteRequestSource
from reqtrack.services.store import SqlAlchemyLogStore
from reqtrack.services.tracker import FlushPolicy, RequestTracker

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]
TrackerFactory = Callable[[AsyncSession], RequestTracker]


def default_tracker_factory(session: AsyncSession) -> RequestTracker:
    """Build a tracker writing through *session* with the configured policy."""
    return RequestTracker(
        SqlAlchemyLogStore(session),
        policy=FlushPolicy(settings.tracking_flush_policy),
        batch_size=settings.tracking_batch_size,
    )


class TrackRequestsMiddleware(BaseHTTPMiddleware):
    """Persist one log entry per tracked request, then forward it unchanged."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        path_prefix: str | None = None,
        session_factory: SessionFactory | None = None,
        tracker_factory: TrackerFactory | None = None,
    ) -> None:
        super().__init__(app)
        prefix = settings.tracking_path_prefix if path_prefix is None else path_prefix
        self.path_prefix = prefix.rstrip("/")
        self.session_factory = session_factory
        self.tracker_factory = tracker_factory or default_tracker_factory

    def tracks(self, path: str) -> bool:
        """Return True if *path* is inside the tracked route group."""
        if not self.path_prefix:
            return True
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.tracks(request.url.path):
            return await call_next(request)

        session_factory = self.session_factory or AsyncSessionLocal
        async with session_factory() as session:
            tracker = self.tracker_factory(session)
            request.state.tracker = tracker
            await tracker.observe(await StarletteRequestSource.capture(request, session))

        response = await call_next(request)
        if tracker.pending:
            logger.warning(
                "Discarding %d unflushed request log entries for %s %s "
                "(policy=%s, batch_size=%d)",
                len(tracker.pending),
                request.method,
                request.url.path,
                tracker.policy,
                tracker.batch_size,
            )
        return response
