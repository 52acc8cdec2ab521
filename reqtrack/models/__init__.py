from reqtrack.models.request_log import RequestLog
from reqtrack.models.user import User

__all__ = [
    "RequestLog",
    "User",
]
