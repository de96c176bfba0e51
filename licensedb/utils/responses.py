from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from licensedb.schemas.common import ErrorResponse


def rfc3339_now() -> str:
    """Current UTC time formatted as RFC3339 without fractional seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def create_error_detail(
    status: int,
    message: str,
    error: str,
    request: Optional[Request] = None,
    path: Optional[str] = None,
) -> ErrorResponse:
    """Create the standard error body.

    Args:
        status: HTTP status code
        message: Human readable summary
        error: Underlying reason
        request: Request that failed, used for the path
        path: Explicit path, overrides the request path
    """
    return ErrorResponse(
        status=status,
        message=message,
        error=error,
        path=path or (request.url.path if request else ""),
        timestamp=rfc3339_now(),
    )


def create_error_response(
    status: int,
    message: str,
    error: str,
    request: Optional[Request] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Create a JSONResponse carrying the standard error body."""
    detail = create_error_detail(status, message, error, request=request)
    return JSONResponse(status_code=status, content=detail.model_dump(mode="json"), headers=headers)
