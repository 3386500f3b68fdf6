"""
Document schemas for request/response validation.

Defines Pydantic models for document upload and retrieval.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from docchat.models.document import DocumentStatus


class DocumentSummary(BaseModel):
    """Schema returned right after an upload."""

    id: str = Field(..., description="Document ID")
    name: str = Field(..., description="Display name")
    status: DocumentStatus = Field(..., description="Processing status")
    created_at: datetime = Field(..., description="Upload timestamp")

    class Config:
        from_attributes = True


class DocumentUploadResponse(BaseModel):
    """Schema for document upload response."""

    success: bool = True
    document: DocumentSummary


class DocumentListItem(BaseModel):
    """Document metadata without the extracted text."""

    id: str = Field(..., description="Document ID")
    user_id: str = Field(..., description="Owner user ID")
    name: str = Field(..., description="Display name")
    original_name: str = Field(..., description="Original filename")
    file_size: int = Field(..., description="File size in bytes")
    mime_type: str = Field(..., description="MIME type")
    status: DocumentStatus = Field(..., description="Processing status")
    page_count: Optional[int] = Field(None, description="Pages, once ready")
    created_at: datetime = Field(..., description="Upload timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    class Config:
        from_attributes = True


class DocumentRead(DocumentListItem):
    """Full document including extracted text."""

    extracted_text: Optional[str] = Field(None, description="Plain text, once ready")


class DocumentListResponse(BaseModel):
    """List of the caller's documents, newest first."""

    documents: List[DocumentListItem]


class DocumentDetailResponse(BaseModel):
    """Single document response."""

    document: DocumentRead


class DeleteResponse(BaseModel):
    """Deletion acknowledgement."""

    success: bool = True
