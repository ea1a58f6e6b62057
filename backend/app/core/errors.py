"""
Domain error taxonomy.

Services raise these; the handlers registered in ``app.main`` turn them into
``{"message": ...}`` JSON responses with the matching status code.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base class for every error that maps to an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[list[dict]] = None):
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"


class InvalidFileType(ValidationError):
    message = "Invalid file type. Only PDF and Word documents are allowed."


class FileTooLarge(ValidationError):
    message = "File too large. Maximum size is 5MB."


class EmptyUpload(ValidationError):
    message = "Please upload a file"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized, no valid token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized to access this route"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class ServerError(AppError):
    pass
