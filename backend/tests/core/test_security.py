"""
Tests for bearer tokens and password hashing.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from docchat.config import settings
from docchat.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


class TestAccessTokens:

    def test_token_carries_user_id(self):
        token = create_access_token("user-123")

        assert verify_token(token) == "user-123"

    def test_token_expires_after_configured_minutes(self):
        claims = jwt.decode(
            create_access_token("user-123"),
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )

        assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def test_expired_token_is_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        token = jwt.encode(
            {"sub": "user-123", "exp": past},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        assert verify_token(token) is None

    def test_token_signed_with_another_key_is_rejected(self):
        token = jwt.encode({"sub": "user-123"}, "some-other-key", algorithm=settings.ALGORITHM)

        assert verify_token(token) is None

    def test_token_without_subject_is_rejected(self):
        token = jwt.encode({"scope": "none"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        assert verify_token(token) is None

    def test_garbage_is_rejected(self):
        assert verify_token("not-a-jwt") is None


class TestPasswords:

    def test_hash_verifies(self):
        hashed = get_password_hash("correct horse")

        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_malformed_hash_never_matches(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False
