"""Credential primitives: password hashing, API key digests and JWT access tokens."""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from reqtrack.config import settings

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

API_KEY_PREFIX_LENGTH = 8


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return _pwd_context.verify(password, password_hash)


def generate_api_key() -> str:
    """Return a new API key: ``sk_`` followed by 64 random hex characters."""
    return "sk_" + secrets.token_hex(32)


def hash_api_key(api_key: str) -> str:
    """Return the SHA-256 hex digest stored in place of *api_key*."""
    return hashlib.sha256(api_key.encode()).hexdigest()


def verify_api_key(api_key: str, stored_hash: str) -> bool:
    """Constant-time comparison of *api_key* against *stored_hash*."""
    return secrets.compare_digest(hash_api_key(api_key), stored_hash)


def get_api_key_prefix(api_key: str) -> str:
    return api_key[:API_KEY_PREFIX_LENGTH]


def create_access_token(user_id: str, email: str) -> str:
    """Return a signed access token valid for ``access_token_expire_minutes``."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": user_id,
        "email": email,
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify *token*.  Raises :exc:`jose.JWTError` if invalid or expired."""
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
