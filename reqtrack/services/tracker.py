"""Request tracker: turns requests into log entries and flushes them to a store.

A ``RequestTracker`` is created per request by
:class:`~reqtrack.middleware.track_requests.TrackRequestsMiddleware`.  Sharing
one instance between concurrently handled requests would mix their entries in
a single buffer; there is no module-level tracker.
"""

import logging
from collections.abc import Sequence
from enum import StrEnum

from reqtrack.schemas.log_entry import LogEntry, RequestInfo, RequestMetadata
from reqtrack.services.request_source import RequestSource
from reqtrack.services.store import LogStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


class FlushPolicy(StrEnum):
    IMMEDIATE = "immediate"
    BATCHED = "batched"


def build_log_entry(source: RequestSource) -> LogEntry:
    """Read every field from *source* into a new :class:`LogEntry`."""
    return LogEntry(
        request=RequestInfo(
            url=source.url,
            method=source.method,
            headers=source.headers,
            body=dict(source.body),
        ),
        metadata=RequestMetadata.for_identity(
            ip=source.ip,
            user_agent=source.user_agent,
            identity=source.identity,
        ),
    )


class RequestTracker:
    """Buffer log entries and flush them according to a fixed policy.

    With ``FlushPolicy.IMMEDIATE`` every :meth:`observe` writes to the store.
    With ``FlushPolicy.BATCHED`` writes happen only once ``batch_size``
    entries are buffered; anything still buffered when the tracker is
    discarded is lost.
    """

    def __init__(
        self,
        store: LogStore,
        *,
        policy: FlushPolicy = FlushPolicy.IMMEDIATE,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._store = store
        self._policy = FlushPolicy(policy)
        self._batch_size = batch_size
        self._buffer: list[LogEntry] = []

    @property
    def policy(self) -> FlushPolicy:
        return self._policy

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def pending(self) -> Sequence[LogEntry]:
        """Entries observed but not yet flushed, oldest first."""
        return tuple(self._buffer)

    async def observe(self, source: RequestSource) -> None:
        self._buffer.append(build_log_entry(source))

        if self._policy is FlushPolicy.IMMEDIATE or len(self._buffer) >= self._batch_size:
            await self.flush()

    async def flush(self) -> None:
        """Hand the whole buffer to the store in one call, then clear it.

        A store failure propagates and leaves the buffer untouched.
        """
        if not self._buffer:
            return
        batch = list(self._buffer)
        logger.info("Storing %d request log entries", len(batch))
        logger.debug("Request log batch: %r", batch)
        await self._store.append(batch)
        self._buffer.clear()
