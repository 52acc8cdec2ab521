from reqtrack.services.auth import (
    create_access_token,
    decode_token,
    generate_api_key,
    get_api_key_prefix,
    hash_api_key,
    hash_password,
    verify_api_key,
    verify_password,
)
from reqtrack.services.identity import bearer_token, resolve_user
from reqtrack.services.request_source import RequestSource, StarletteRequestSource
from reqtrack.services.store import LogStore, SqlAlchemyLogStore
from reqtrack.services.tracker import FlushPolicy, RequestTracker, build_log_entry

__all__ = [
    # auth
    "create_access_token",
    "decode_token",
    "generate_api_key",
    "get_api_key_prefix",
    "hash_api_key",
    "hash_password",
    "verify_api_key",
    "verify_password",
    # identity
    "bearer_token",
    "resolve_user",
    # tracking
    "FlushPolicy",
    "LogStore",
    "RequestSource",
    "RequestTracker",
    "SqlAlchemyLogStore",
    "StarletteRequestSource",
    "build_log_entry",
]
