"""
Pydantic schemas for request/response validation.
"""

from docchat.schemas.user import UserCreate, UserRead, UserSummary, RegisterResponse
from docchat.schemas.auth import Token
from docchat.schemas.document import (
    DocumentSummary,
    DocumentUploadResponse,
    DocumentListItem,
    DocumentRead,
    DocumentListResponse,
    DocumentDetailResponse,
    DeleteResponse,
)

__all__ = [
    "UserCreate",
    "UserRead",
    "UserSummary",
    "RegisterResponse",
    "Token",
    "DocumentSummary",
    "DocumentUploadResponse",
    "DocumentListItem",
    "DocumentRead",
    "DocumentListResponse",
    "DocumentDetailResponse",
    "DeleteResponse",
]
