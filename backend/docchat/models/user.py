"""
User model.

Users are created by credential registration or by an OAuth sign-in.
"""

from typing import Optional
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.db.base import Base, IDMixin, TimestampMixin


class User(Base, IDMixin, TimestampMixin):
    """
    User model.

    Attributes:
        id: Primary key.
        name: Display name.
        email: Lowercased, unique email address.
        image: Avatar URL (OAuth providers).
        hashed_password: Bcrypt hash, absent for OAuth-only accounts.
        is_active: Whether user can use the API.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(320),
        unique=True,
        index=True,
        nullable=False,
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
    )
    hashed_password: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    documents = relationship(
        "Document",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email={self.email})>"
