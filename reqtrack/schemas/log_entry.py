"""Pydantic schemas describing one observed request.

A :class:`LogEntry` is frozen: once built by the tracker it is only buffered
and, at flush time, encoded into the JSON documents stored in the ``logs``
table.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_EXAMPLE_TS = "2026-01-15T10:30:00Z"


class UserIdentity(BaseModel):
    """The authenticated principal behind a request."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    name: str
    email: str


class RequestInfo(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "url": "http://localhost:8000/api/user",
                "method": "GET",
                "headers": {"user-agent": ["test-agent"], "accept": ["*/*"]},
                "body": {},
            }
        },
    )

    url: str
    method: str
    headers: dict[str, list[str]] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def method_upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("headers", mode="before")
    @classmethod
    def normalize_headers(cls, v: Any) -> dict[str, list[str]]:
        """Lower-case header names and collapse duplicates into one list.

        Accepts a plain mapping (single or multi-valued) or any iterable of
        ``(name, value)`` pairs such as Starlette's ``Headers.items()``.
        """
        pairs = v.items() if isinstance(v, Mapping) else v
        headers: dict[str, list[str]] = {}
        for name, value in pairs:
            values = value if isinstance(value, (list, tuple)) else [value]
            headers.setdefault(str(name).lower(), []).extend(str(item) for item in values)
        return headers


class RequestMetadata(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "ip": "10.0.0.1",
                "user_agent": "test-agent",
                "user_id": 123,
                "user_name": "John Doe",
                "user_email": "john@example.com",
            }
        },
    )

    ip: str | None = None
    user_agent: str | None = None
    user_id: int | str | None = None
    user_name: str | None = None
    user_email: str | None = None

    @model_validator(mode="after")
    def user_fields_all_or_none(self) -> Self:
        present = [f is not None for f in (self.user_id, self.user_name, self.user_email)]
        if any(present) and not all(present):
            raise ValueError("user_id, user_name and user_email must be set together")
        return self

    @classmethod
    def for_identity(
        cls,
        *,
        ip: str | None,
        user_agent: str | None,
        identity: UserIdentity | None,
    ) -> Self:
        if identity is None:
            return cls(ip=ip, user_agent=user_agent)
        return cls(
            ip=ip,
            user_agent=user_agent,
            user_id=identity.id,
            user_name=identity.name,
            user_email=identity.email,
        )


class LogEntry(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "request": RequestInfo.model_config["json_schema_extra"]["example"],  # type: ignore[index]
                "metadata": RequestMetadata.model_config["json_schema_extra"]["example"],  # type: ignore[index]
                "time": _EXAMPLE_TS,
            }
        },
    )

    request: RequestInfo
    metadata: RequestMetadata
    time: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("time")
    @classmethod
    def time_is_aware(cls, v: datetime) -> datetime:
        # Naive timestamps are taken to be UTC; the column is timestamptz.
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)

    def encode(self) -> dict[str, Any]:
        """Return the storable form: JSON documents plus the raw timestamp."""
        return {
            "request": self.request.model_dump(mode="json"),
            "metadata": self.metadata.model_dump(mode="json"),
            "time": self.time,
        }

    @classmethod
    def decode(cls, row: Mapping[str, Any]) -> Self:
        """Rebuild an entry from the mapping produced by :meth:`encode`."""
        return cls(
            request=RequestInfo.model_validate(row["request"]),
            metadata=RequestMetadata.model_validate(row["metadata"]),
            time=row["time"],
        )
