"""Resolve the user behind a request's credentials.

Used both by the tracking middleware, which only needs to know *who* made a
request, and by :func:`reqtrack.dependencies.get_current_user`, which turns a
missing user into ``401``.  Bad credentials therefore yield ``None`` here
rather than an exception.
"""

import uuid

from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reqtrack.models import User
from reqtrack.services.auth import decode_token, get_api_key_prefix, verify_api_key


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def resolve_user(
    db: AsyncSession,
    *,
    bearer: str | None = None,
    api_key: str | None = None,
) -> User | None:
    """Return the active user for *bearer* (checked first) or *api_key*."""
    if bearer:
        return await _user_from_token(bearer, db)
    if api_key:
        return await _user_from_api_key(api_key, db)
    return None


async def _user_from_token(token: str, db: AsyncSession) -> User | None:
    try:
        payload = decode_token(token)
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        return None

    user: User | None = await db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


async def _user_from_api_key(api_key: str, db: AsyncSession) -> User | None:
    result = await db.execute(
        select(User).where(User.api_key_prefix == get_api_key_prefix(api_key))
    )
    user: User | None = result.scalar_one_or_none()

    if user is None or user.api_key_hash is None or not user.is_active:
        return None
    if not verify_api_key(api_key, user.api_key_hash):
        return None
    return user
