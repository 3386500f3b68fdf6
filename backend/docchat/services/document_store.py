"""
Document store access.

``DocumentRepository`` is the only way request handlers reach documents, and
it cannot be built without an owner, so every read and delete is filtered by
owner. The terminal status writers are unscoped and belong to the extraction
task alone.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from docchat.models.document import Document, DocumentStatus

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Owner-scoped CRUD over documents."""

    def __init__(self, db: Session, owner_id: str) -> None:
        if not owner_id:
            raise ValueError("DocumentRepository requires an owner id")
        self.db = db
        self.owner_id = owner_id

    def create(
        self,
        name: str,
        original_name: str,
        file_path: str,
        file_size: int,
        mime_type: str,
    ) -> Document:
        """Insert a new document in the processing state."""
        document = Document(
            user_id=self.owner_id,
            name=name.strip()[:255],
            original_name=original_name.strip(),
            file_path=file_path,
            file_size=file_size,
            mime_type=mime_type,
            status=DocumentStatus.PROCESSING,
        )
        self.db.add(document)
        self.db.commit()
        self.db.refresh(document)
        return document

    def get(self, document_id: str) -> Optional[Document]:
        """Return the owner's document, or None if absent or owned by someone else."""
        return self.db.execute(
            select(Document).where(
                Document.id == document_id,
                Document.user_id == self.owner_id,
            )
        ).scalar_one_or_none()

    def list(self) -> List[Document]:
        """Return the owner's documents, newest first."""
        return list(
            self.db.execute(
                select(Document)
                .where(Document.user_id == self.owner_id)
                .order_by(Document.created_at.desc())
            ).scalars()
        )

    def delete(self, document: Document) -> None:
        """Delete one of the owner's documents."""
        if document.user_id != self.owner_id:
            raise ValueError("Document does not belong to this owner")
        self.db.delete(document)
        self.db.commit()


def mark_ready(db: Session, document_id: str, text: str, page_count: int) -> bool:
    """
    Move a processing document to ready with its text and page count.

    Returns False, without writing, when the document is gone or already
    settled.
    """
    result = db.execute(
        update(Document)
        .where(
            Document.id == document_id,
            Document.status == DocumentStatus.PROCESSING,
        )
        .values(
            status=DocumentStatus.READY,
            extracted_text=text,
            page_count=page_count,
        )
    )
    db.commit()
    return result.rowcount == 1


def mark_error(db: Session, document_id: str) -> bool:
    """
    Move a processing document to error.

    Text and page count stay unset. Returns False when nothing was updated.
    """
    result = db.execute(
        update(Document)
        .where(
            Document.id == document_id,
            Document.status == DocumentStatus.PROCESSING,
        )
        .values(status=DocumentStatus.ERROR)
    )
    db.commit()
    return result.rowcount == 1


def list_processing_documents(db: Session) -> List[Document]:
    """Return every document still waiting on extraction, oldest first."""
    return list(
        db.execute(
            select(Document)
            .where(Document.status == DocumentStatus.PROCESSING)
            .order_by(Document.created_at.asc())
        ).scalars()
    )
