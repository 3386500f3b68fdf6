"""
Upload orchestration.

Validates an incoming PDF, stores its bytes, records the document in the
processing state and hands the bytes to the extraction worker. The caller
gets the new document back without waiting for extraction.
"""

import logging
import re
from typing import Optional

from sqlalchemy.orm import Session

from docchat.config import settings
from docchat.core.exceptions import ValidationException
from docchat.core.metrics import track_extraction, track_upload
from docchat.models.document import Document
from docchat.services.document_store import DocumentRepository, mark_error
from docchat.services.extraction_worker import ExtractionWorker
from docchat.services.storage_service import LocalStorageService

logger = logging.getLogger(__name__)

PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


class UploadRejected(ValidationException):
    """A 400 naming which upload check failed."""

    MISSING_FILE = "missing_file"
    INVALID_TYPE = "invalid_type"
    FILE_TOO_LARGE = "file_too_large"

    def __init__(self, reason: str, detail: str):
        super().__init__(detail=detail, reason=reason)


def display_name(filename: str) -> str:
    """Strip a trailing .pdf (any case) from the uploaded filename."""
    return PDF_SUFFIX.sub("", filename)


class UploadOrchestrator:
    """Accept one uploaded file for one authenticated owner."""

    def __init__(
        self,
        db: Session,
        storage: LocalStorageService,
        worker: ExtractionWorker,
        max_size: Optional[int] = None,
        allowed_content_type: Optional[str] = None,
    ) -> None:
        self.db = db
        self.storage = storage
        self.worker = worker
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE
        self.allowed_content_type = allowed_content_type or settings.ALLOWED_CONTENT_TYPE

    def validate(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        size: Optional[int],
    ) -> None:
        """
        Run the upload checks in order: present, PDF, within the size limit.

        Raises:
            UploadRejected: Naming the first failed check.
        """
        if not filename or size is None:
            raise UploadRejected(UploadRejected.MISSING_FILE, "No file provided")

        if content_type != self.allowed_content_type:
            raise UploadRejected(UploadRejected.INVALID_TYPE, "Only PDF files are allowed")

        if size > self.max_size:
            limit_mb = self.max_size // (1024 * 1024)
            raise UploadRejected(
                UploadRejected.FILE_TOO_LARGE,
                f"File too large. Maximum size is {limit_mb}MB",
            )

    def upload(
        self,
        owner_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        data: Optional[bytes],
    ) -> Document:
        """
        Validate, store and register an uploaded PDF, then schedule extraction.

        Args:
            owner_id: ID of the authenticated user.
            filename: Original filename from the multipart part.
            content_type: Declared MIME type.
            data: File bytes (None when no file part was sent).

        Returns:
            Document: The new record, processing, or error if extraction
                could not be scheduled.

        Raises:
            UploadRejected: If validation fails. Nothing is written.
            StorageError: If the blob cannot be written.
        """
        try:
            self.validate(filename, content_type, None if data is None else len(data))
        except UploadRejected as e:
            track_upload(e.reason)
            logger.info(f"Upload rejected for user {owner_id}: {e.reason}")
            raise

        file_key = self.storage.generate_file_key(filename)
        # The blob must exist before any record points at it
        self.storage.upload_file(data, file_key)

        repository = DocumentRepository(self.db, owner_id)
        try:
            document = repository.create(
                name=display_name(filename),
                original_name=filename,
                file_path=file_key,
                file_size=len(data),
                mime_type=content_type,
            )
        except Exception:
            self.db.rollback()
            logger.exception(f"Could not record upload {file_key}; removing blob")
            try:
                self.storage.delete_file(file_key)
            except Exception as cleanup_error:
                logger.error(f"Orphaned blob {file_key}: {cleanup_error}")
            raise

        track_upload("accepted", len(data))
        logger.info(f"Uploaded: {filename} as {document.id} for user {owner_id}")

        try:
            self.worker.submit(document.id, data)
        except Exception as e:
            # The record is committed; settle it rather than leave it processing
            logger.exception(f"Could not schedule extraction for {document.id}: {e}")
            mark_error(self.db, document.id)
            track_extraction("error", 0.0)
            self.db.refresh(document)
        return document
