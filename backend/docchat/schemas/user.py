"""
User schemas for request/response validation.

Defines Pydantic models for user-related API operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Base schema with common user fields."""

    name: str = Field(..., min_length=1, max_length=100, description="User's display name")
    email: EmailStr = Field(..., description="User's email address")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserCreate(UserBase):
    """Schema for creating a new user."""

    password: str = Field(
        ...,
        min_length=8,
        description="Password (minimum 8 characters)",
    )


class UserSummary(BaseModel):
    """Minimal user data returned on registration."""

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    """Schema for the registration response."""

    message: str = "Account created successfully"
    user: UserSummary


class UserRead(UserSummary):
    """Schema for reading user data."""

    image: Optional[str] = Field(None, description="Avatar URL")
    is_active: bool = Field(True, description="Whether user is active")
    created_at: Optional[datetime] = Field(None, description="Account creation time")

    class Config:
        from_attributes = True
