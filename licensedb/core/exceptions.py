"""Custom exception hierarchy."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    ``message`` is the human readable summary returned to clients and
    ``detail`` the short machine-oriented reason shown next to it.
    """

    status_code: int = 500
    default_detail: str = "internal error"

    def __init__(
        self,
        message: str,
        original_error: Exception = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.detail = detail or (str(original_error) if original_error else self.default_detail)


class ValidationError(AppError):
    """Raised when input is malformed or violates an update policy."""

    status_code = 400
    default_detail = "invalid request"


class DecodeError(ValidationError):
    """Raised when a request field cannot be decoded into its declared type."""

    default_detail = "invalid json body"


class NotFoundError(AppError):
    """Raised when no obligation or related entity matches."""

    status_code = 404
    default_detail = "record not found"


class ConflictError(AppError):
    """Raised when a uniqueness rule would be violated."""

    status_code = 409
    default_detail = "duplicate record"


class InternalError(AppError):
    """Raised when an invariant or storage operation fails unexpectedly."""

    status_code = 500


class DatabaseError(InternalError):
    """Raised when a database operation fails."""

    pass


class AuthenticationError(AppError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401
    default_detail = "authentication required"
