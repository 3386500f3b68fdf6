"""
Authentication endpoints for registration and login.

Provides endpoints for user registration and bearer token issuance.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docchat.db.session import get_db
from docchat.models.user import User
from docchat.schemas.auth import Token
from docchat.schemas.user import UserCreate, UserSummary, RegisterResponse
from docchat.core.exceptions import ConflictException, CredentialsException
from docchat.core.security import (
    create_access_token,
    verify_password,
    get_password_hash,
)
from docchat.core.rate_limiter import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)
router = APIRouter()

DUPLICATE_EMAIL = "An account with this email already exists"


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
@limiter.limit(RATE_LIMITS["register"])
def register(
    request: Request,
    user_in: UserCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Register a new account with a name, email and password.
    """
    existing = db.execute(
        select(User.id).where(User.email == user_in.email)
    ).first()
    if existing:
        raise ConflictException(DUPLICATE_EMAIL)

    user = User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise ConflictException(DUPLICATE_EMAIL)
    db.refresh(user)

    logger.info(f"Registered user {user.id}")
    return RegisterResponse(user=UserSummary.model_validate(user))


@router.post(
    "/login",
    response_model=Token,
    summary="Login and get access token",
)
@limiter.limit(RATE_LIMITS["login"])
def login(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[Session, Depends(get_db)],
) -> Token:
    """
    Authenticate with email (as username) and password, and return a JWT.

    Accounts created through an OAuth provider have no password and cannot
    log in here.
    """
    user = db.execute(
        select(User).where(User.email == form_data.username.strip().lower())
    ).scalar_one_or_none()

    if user is None or not user.hashed_password:
        raise CredentialsException("Incorrect email or password")

    if not verify_password(form_data.password, user.hashed_password):
        raise CredentialsException("Incorrect email or password")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    access_token = create_access_token(user.id)
    return Token(access_token=access_token, token_type="bearer")
