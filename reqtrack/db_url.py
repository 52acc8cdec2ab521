"""Engine construction shared by the application and Alembic."""

import ssl as _ssl
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


def asyncpg_url(url: str) -> tuple[str, dict[str, Any]]:
    """Split *url* into an asyncpg-compatible URL and ``connect_args``.

    asyncpg rejects ``sslmode`` in the query string and wants an ``ssl``
    context instead, so the parameter is stripped and translated.
    """
    parts = urlsplit(url)
    qs = parse_qs(parts.query)
    connect_args: dict[str, Any] = {}

    if "sslmode" in qs:
        mode = qs.pop("sslmode")[0]
        if mode in ("require", "verify-ca", "verify-full"):
            connect_args["ssl"] = _ssl.create_default_context()
        url = urlunsplit(parts._replace(query=urlencode(qs, doseq=True)))

    return url, connect_args


def build_engine(url: str, **kwargs: Any) -> AsyncEngine:
    clean_url, connect_args = asyncpg_url(url)
    return create_async_engine(clean_url, connect_args=connect_args, **kwargs)
