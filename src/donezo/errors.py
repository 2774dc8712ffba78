"""Application error taxonomy.

Every error carries the HTTP status it maps to and the message rendered in the
``{"error": message}`` response body.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AppError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(AppError):
    """The targeted id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class BadRequest(AppError):
    """Caller supplied invalid input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class StorageError(AppError):
    """The underlying store failed; the message is passed through verbatim."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
