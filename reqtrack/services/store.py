"""Append-only sinks for request log entries.

:class:`LogStore` is the contract the tracker writes through;
:class:`SqlAlchemyLogStore` is the production implementation backed by the
``logs`` table.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from reqtrack.models.request_log import RequestLog
from reqtrack.schemas.log_entry import LogEntry


@runtime_checkable
class LogStore(Protocol):
    async def append(self, entries: Sequence[LogEntry]) -> None:
        """Persist *entries* as one batch, or raise."""
        ...


def to_row(entry: LogEntry, now: datetime) -> dict[str, Any]:
    """Map an entry onto the ``logs`` columns, keyed by ORM attribute name."""
    encoded = entry.encode()
    return {
        "request": encoded["request"],
        "meta": encoded["metadata"],
        "time": encoded["time"],
        "created_at": now,
        "updated_at": now,
    }


class SqlAlchemyLogStore:
    """Write batches into ``logs`` with a single multi-row INSERT.

    The batch is committed as one transaction.  Errors from the driver are
    not caught here; they reach the caller with the session still needing a
    rollback, which the owning ``async with`` block performs on exit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, entries: Sequence[LogEntry]) -> None:
        if not entries:
            return
        now = datetime.now(UTC)
        rows = [to_row(entry, now) for entry in entries]
        await self._session.execute(insert(RequestLog), rows)
        await self._session.commit()
