"""
Bearer tokens and password hashes.

Access tokens are JWTs whose subject is the user id and which expire after
``ACCESS_TOKEN_EXPIRE_MINUTES``. Passwords are stored as bcrypt hashes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from docchat.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(user_id: str) -> str:
    """Issue a bearer token for a user."""
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[str]:
    """
    Return the user id a token was issued for.

    None when the signature is wrong, the token has expired or it carries
    no subject.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return claims.get("sub") or None


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash. A malformed hash never matches."""
    try:
        return pwd_context.verify(password, hashed_password)
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
