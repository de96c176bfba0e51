"""Translate application errors into the standard error body."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from licensedb.core.exceptions import AppError, AuthenticationError
from licensedb.utils.logging import get_logger
from licensedb.utils.responses import create_error_response
from licensedb.utils.validation import describe_validation_errors

LOGGER = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        LOGGER.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            exc_info=exc.original_error,
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return create_error_response(
        exc.status_code, exc.message, exc.detail, request=request, headers=headers
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    body_errors = any(item.get("loc", ("",))[0] == "body" for item in exc.errors())
    message = "invalid json body" if body_errors else "invalid request parameters"
    detail = describe_validation_errors(exc.errors(), skip_loc=1)
    return create_error_response(status.HTTP_400_BAD_REQUEST, message, detail, request=request)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return create_error_response(
        exc.status_code, str(exc.detail), str(exc.detail), request=request, headers=exc.headers
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
