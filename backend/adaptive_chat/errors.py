"""
Domain error taxonomy.

Services raise these; main.py turns them into JSON responses. Provider
failures (UpstreamError) never reach HTTP: the model gateway converts them
into a visible assistant message.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors with a client-facing message and HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(AppError):
    """Bad credentials or a missing/invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ConflictError(AppError):
    """Duplicate unique value or a concurrent modification."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class NotFoundError(AppError):
    """Missing resource, or one the caller does not own."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class UpstreamError(AppError):
    """The model provider failed after retries."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Model provider error"


class ServerError(AppError):
    """Anything unexpected. The message sent to clients is always generic."""
