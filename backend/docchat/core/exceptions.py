"""
Custom exception classes for the application.

Provides standardized HTTP exceptions for common error cases.
"""

from typing import Optional

from fastapi import HTTPException, status


class CredentialsException(HTTPException):
    """Exception raised when authentication credentials are missing or invalid."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundException(HTTPException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class ValidationException(HTTPException):
    """
    Exception raised for invalid request data.

    ``reason`` is a short machine-readable classification of the failed check.
    """

    def __init__(self, detail: str = "Bad request", reason: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )
        self.reason = reason


class ConflictException(HTTPException):
    """Exception raised when a unique field is already taken."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class InternalServerException(HTTPException):
    """Exception raised for unexpected server-side failures."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
