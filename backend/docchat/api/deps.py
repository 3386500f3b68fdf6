"""
API dependencies for dependency injection.

Provides database sessions, authentication, and the document services.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from docchat.config import settings
from docchat.db.session import get_db
from docchat.core.security import verify_token
from docchat.core.exceptions import CredentialsException, NotFoundException
from docchat.models.user import User
from docchat.services.document_store import DocumentRepository
from docchat.services.extraction_worker import ExtractionWorker, get_extraction_worker
from docchat.services.storage_service import LocalStorageService, get_storage_service

# OAuth2 scheme for token extraction; missing tokens are reported as 401 below
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False,
)


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
) -> User:
    """
    Get the current authenticated user from JWT token.

    Args:
        db: Database session.
        token: JWT access token from Authorization header.

    Returns:
        User: The authenticated user.

    Raises:
        CredentialsException: If the token is missing or invalid.
        NotFoundException: If the token is valid but its user is gone.
    """
    if not token:
        raise CredentialsException("Unauthorized")

    user_id = verify_token(token)
    if user_id is None:
        raise CredentialsException()

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundException("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    return user


def get_document_repository(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DocumentRepository:
    """Document access scoped to the authenticated user."""
    return DocumentRepository(db, current_user.id)


def get_storage() -> LocalStorageService:
    """Blob storage dependency."""
    return get_storage_service()


def get_worker() -> ExtractionWorker:
    """Extraction worker dependency."""
    return get_extraction_worker()
