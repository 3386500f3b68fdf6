"""
SQLAlchemy ORM models.

Import all models here so they register on the declarative base.
"""

from docchat.models.user import User
from docchat.models.document import Document, DocumentStatus

__all__ = [
    "User",
    "Document",
    "DocumentStatus",
]
