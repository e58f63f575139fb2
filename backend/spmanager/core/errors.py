# spmanager/core/errors.py
"""
Application error taxonomy.

Every error a client can observe is an AppError carrying a stable machine-readable
code, a human message and an HTTP status. Storage and transport exceptions are
translated into these classes before they reach the API layer, and a single
exception handler in main.py renders them as:

    {"success": false, "error": {"code": "...", "message": "..."}}
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors rendered to clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, code: str | None = None, message: str | None = None):
        self.code = code or self.code
        self.message = message or self.message
        super().__init__(f"{self.code}: {self.message}")

    def to_dict(self) -> dict:
        return {"success": False, "error": {"code": self.code, "message": self.message}}


class ValidationError(AppError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    message = "Invalid request"


class PayloadTooLargeError(AppError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    code = "PAYLOAD_TOO_LARGE"
    message = "Request body is too large"


class UnauthorizedError(AppError):
    """No credentials, or credentials that do not match."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_REQUIRED"
    message = "Authentication required"


class ForbiddenError(AppError):
    """Authenticated or not, the action is denied."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Not found"


class ConflictError(AppError):
    """A uniqueness constraint was violated."""
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Resource already exists"


class RateLimitedError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    message = "Too many requests, please try again later"

    def __init__(self, retry_after: float, code: str | None = None, message: str | None = None):
        super().__init__(code, message)
        self.retry_after = retry_after


class UnavailableError(AppError):
    """Storage could not be reached or did not answer in time."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_UNAVAILABLE"
    message = "Storage is temporarily unavailable"


class UpstreamError(AppError):
    """An external service behind a proxy route failed."""
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "UPSTREAM_ERROR"
    message = "Upstream service failed"
