"""Exception handlers producing the ``ErrorResponse`` JSON envelope.

Registered on the application in :mod:`reqtrack.main`.  The catch-all
handler is also what a client sees when request tracking fails, since the
tracking middleware lets store errors propagate.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from reqtrack.schemas.common import ErrorCode, ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_TO_CODE: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}

_LOCATION_ROOTS = ("body", "query", "path", "header", "cookie")


def _error_json(status_code: int, error: ErrorCode, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error).model_dump(),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Map ``HTTPException`` onto a stable ``error.code`` (404 -> ``NOT_FOUND``)."""
    code = _STATUS_TO_CODE.get(exc.status_code, f"HTTP_{exc.status_code}")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_json(
        exc.status_code,
        ErrorCode(code=code, message=message),
        headers=dict(exc.headers) if exc.headers else None,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report each failed field with its dotted path, location prefix stripped."""
    details = []
    for error in exc.errors():
        parts = [str(part) for part in error["loc"] if part not in _LOCATION_ROOTS]
        details.append(ErrorDetail(field=".".join(parts) or "unknown", message=error["msg"]))

    return _error_json(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode(
            code="UNPROCESSABLE_ENTITY",
            message="Request validation failed",
            details=details,
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure with its traceback and return a generic 500 envelope."""
    logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode(code="INTERNAL_ERROR", message="An internal server error occurred"),
    )
