"""
Document model for uploaded PDFs.

Stores file metadata, processing status and the extracted text.
"""

from typing import Optional

from sqlalchemy import String, Integer, ForeignKey, BigInteger, Enum, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from docchat.db.base import Base, IDMixin, TimestampMixin


class DocumentStatus(str, enum.Enum):
    """Enum for document processing status."""

    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class Document(Base, IDMixin, TimestampMixin):
    """
    Document model for uploaded files.

    Attributes:
        id: Primary key.
        user_id: Foreign key to the owning user.
        name: Display name (original filename without the .pdf suffix).
        original_name: Filename as uploaded.
        file_path: Storage key inside the upload directory.
        file_size: Size in bytes.
        mime_type: Declared MIME type.
        status: Processing status.
        extracted_text: Plain text, set only once status is ready.
        page_count: Number of pages, set only once status is ready.
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_user_id_created_at", "user_id", "created_at"),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    original_name: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
    )
    file_path: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
    )
    file_size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )
    mime_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus),
        default=DocumentStatus.PROCESSING,
        nullable=False,
    )
    extracted_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    page_count: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    # Relationships
    user = relationship("User", back_populates="documents")

    def __repr__(self) -> str:
        """String representation of Document."""
        return f"<Document(id={self.id}, name={self.name}, status={self.status})>"
