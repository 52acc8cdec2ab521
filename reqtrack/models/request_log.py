from datetime import datetime
from typing import Any

from sqlalchemy import Index
from sqlalchemy.orm import Mapped, mapped_column

from reqtrack.models.base import Base, TimestampMixin, UUIDMixin


class RequestLog(UUIDMixin, TimestampMixin, Base):
    """One persisted request observation.

    ``metadata`` is reserved on declarative classes, so the column of that
    name is mapped to the ``meta`` attribute.
    """

    __tablename__ = "logs"
    __table_args__ = (Index("ix_logs_time", "time"),)

    request: Mapped[dict[str, Any]] = mapped_column(nullable=False)
    meta: Mapped[dict[str, Any]] = mapped_column("metadata", nullable=False)
    time: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        method = self.request.get("method") if self.request else None
        url = self.request.get("url") if self.request else None
        return f"<RequestLog id={self.id!r} method={method!r} url={url!r}>"
