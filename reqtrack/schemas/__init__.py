from reqtrack.schemas.auth import LoginRequest, TokenResponse, UserResponse
from reqtrack.schemas.common import ErrorCode, ErrorDetail, ErrorResponse
from reqtrack.schemas.health import HealthResponse
from reqtrack.schemas.log_entry import LogEntry, RequestInfo, RequestMetadata, UserIdentity

__all__ = [
    # auth
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    # common
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    # health
    "HealthResponse",
    # log entries
    "LogEntry",
    "RequestInfo",
    "RequestMetadata",
    "UserIdentity",
]
