"""
Document API Endpoints.

Upload, list, fetch and delete the caller's PDFs. Every lookup goes through
the owner-scoped repository, so another user's document is reported as
not found.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docchat.config import settings
from docchat.db.session import get_db
from docchat.api.deps import get_current_user, get_document_repository, get_storage, get_worker
from docchat.core.exceptions import InternalServerException, NotFoundException
from docchat.core.rate_limiter import limiter, RATE_LIMITS
from docchat.models.user import User
from docchat.schemas.document import (
    DeleteResponse,
    DocumentDetailResponse,
    DocumentListItem,
    DocumentListResponse,
    DocumentRead,
    DocumentSummary,
    DocumentUploadResponse,
)
from docchat.services.document_store import DocumentRepository
from docchat.services.extraction_worker import ExtractionWorker
from docchat.services.storage_service import LocalStorageService, StorageError
from docchat.services.upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=DocumentUploadResponse,
    summary="Upload a PDF",
)
@limiter.limit(RATE_LIMITS["upload"])
def upload_document(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[LocalStorageService, Depends(get_storage)],
    worker: Annotated[ExtractionWorker, Depends(get_worker)],
    file: Annotated[Optional[UploadFile], File(description="PDF file (max 10MB)")] = None,
):
    """
    Upload a PDF for text extraction.

    Responds as soon as the document is recorded; extraction continues in
    the background and is reported through the document status.
    """
    filename = content_type = data = None
    if file is not None:
        filename = file.filename
        content_type = file.content_type
        # Starlette has already spooled the part; copy at most one byte past the
        # limit into memory so an oversize file is rejected without loading it
        data = file.file.read(settings.MAX_UPLOAD_SIZE + 1)

    orchestrator = UploadOrchestrator(db=db, storage=storage, worker=worker)
    try:
        document = orchestrator.upload(
            owner_id=current_user.id,
            filename=filename,
            content_type=content_type,
            data=data,
        )
    except (StorageError, SQLAlchemyError) as e:
        logger.error(f"Upload error: {e}")
        raise InternalServerException("Failed to upload document")

    return DocumentUploadResponse(document=DocumentSummary.model_validate(document))


@router.get("", response_model=DocumentListResponse)
def list_documents(
    repository: Annotated[DocumentRepository, Depends(get_document_repository)],
):
    """List documents for the current user, newest first, without their text."""
    documents = repository.list()
    return DocumentListResponse(
        documents=[DocumentListItem.model_validate(doc) for doc in documents],
    )


@router.get("/{document_id}", response_model=DocumentDetailResponse)
def get_document(
    document_id: str,
    repository: Annotated[DocumentRepository, Depends(get_document_repository)],
):
    """Get a specific document, including its extracted text."""
    document = repository.get(document_id)
    if document is None:
        raise NotFoundException("Document not found")

    return DocumentDetailResponse(document=DocumentRead.model_validate(document))


@router.delete("/{document_id}", response_model=DeleteResponse)
def delete_document(
    document_id: str,
    repository: Annotated[DocumentRepository, Depends(get_document_repository)],
    storage: Annotated[LocalStorageService, Depends(get_storage)],
    worker: Annotated[ExtractionWorker, Depends(get_worker)],
):
    """
    Delete a document and its stored file.

    A queued extraction is cancelled first. A failure to remove the file is
    logged and does not stop the record from being deleted.
    """
    document = repository.get(document_id)
    if document is None:
        raise NotFoundException("Document not found")

    worker.cancel(document.id)

    try:
        storage.delete_file(document.file_path)
    except StorageError as e:
        logger.error(f"Could not delete blob for document {document.id}: {e}")

    repository.delete(document)
    logger.info(f"Deleted document {document_id}")

    return DeleteResponse()
