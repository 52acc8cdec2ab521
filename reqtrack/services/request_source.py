"""Read side of request tracking.

The tracker only sees a :class:`RequestSource`: plain, side-effect-free reads
of one in-flight request.  :class:`StarletteRequestSource` captures those
values from a Starlette request up front, because reading the body and
resolving credentials are both awaitable operations.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile
from starlette.requests import Request

from reqtrack.schemas.log_entry import UserIdentity
from reqtrack.services.identity import bearer_token, resolve_user

logger = logging.getLogger(__name__)

_JSON_TYPES = ("application/json",)
_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class RequestSource(Protocol):
    @property
    def url(self) -> str: ...

    @property
    def method(self) -> str: ...

    @property
    def headers(self) -> Mapping[str, list[str]]: ...

    @property
    def body(self) -> Mapping[str, Any]: ...

    @property
    def ip(self) -> str | None: ...

    @property
    def user_agent(self) -> str | None: ...

    @property
    def identity(self) -> UserIdentity | None: ...


@dataclass(frozen=True)
class StarletteRequestSource:
    url: str
    method: str
    headers: Mapping[str, list[str]] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    ip: str | None = None
    user_agent: str | None = None
    identity: UserIdentity | None = None

    @classmethod
    async def capture(cls, request: Request, db: AsyncSession) -> "StarletteRequestSource":
        """Snapshot *request*, resolving its credentials against *db*."""
        user = await resolve_user(
            db,
            bearer=bearer_token(request.headers.get("authorization")),
            api_key=request.headers.get("x-api-key"),
        )
        identity = (
            UserIdentity(id=str(user.id), name=user.name, email=user.email)
            if user is not None
            else None
        )
        return cls(
            url=str(request.url.replace(query="", fragment="")),
            method=request.method,
            headers=_multi_dict(request.headers.items()),
            body=await read_parameters(request),
            ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            identity=identity,
        )


async def read_parameters(request: Request) -> dict[str, Any]:
    """Merge query-string and body parameters; body values win on conflict.

    The body is read once through ``request.body()`` so Starlette caches it
    and the downstream application can still consume it.  Bodies that are
    not a JSON object or a form are ignored.
    """
    params = _collapse(_multi_dict(request.query_params.multi_items()))

    raw = await request.body()
    if not raw:
        return params

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in _JSON_TYPES or content_type.endswith("+json"):
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring undecodable JSON body on %s %s", request.method, request.url.path)
            return params
        if isinstance(payload, dict):
            params.update(payload)
    elif content_type in _FORM_TYPES:
        form = await request.form()
        try:
            params.update(
                _collapse(_multi_dict((k, _form_value(v)) for k, v in form.multi_items()))
            )
        finally:
            await form.close()
    return params


def _form_value(value: Any) -> Any:
    if isinstance(value, UploadFile):
        return value.filename
    return value


def _multi_dict(pairs: Iterable[tuple[str, Any]]) -> dict[str, list[Any]]:
    result: dict[str, list[Any]] = {}
    for key, value in pairs:
        result.setdefault(key, []).append(value)
    return result


def _collapse(values: dict[str, list[Any]]) -> dict[str, Any]:
    """Single-valued keys become scalars; repeated keys stay lists."""
    return {key: items[0] if len(items) == 1 else items for key, items in values.items()}
