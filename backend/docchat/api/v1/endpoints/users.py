"""
User profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from docchat.models.user import User
from docchat.schemas.user import UserRead
from docchat.api.deps import get_current_user

router = APIRouter()


@router.get(
    "/me",
    response_model=UserRead,
    summary="Get current user profile",
)
async def get_current_user_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current authenticated user's profile."""
    return current_user
