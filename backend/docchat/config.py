"""
Application configuration using Pydantic Settings.

Loads environment variables and provides typed configuration access.
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings
from typing import Optional, Literal


# backend/docchat/config.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "DocChat"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database - SQLite file by default
    DATABASE_URL: str = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{PROJECT_ROOT / 'data' / 'docchat.db'}",
    )

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Uploads
    UPLOAD_DIR: str = str(PROJECT_ROOT / "uploads")
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10 MiB
    ALLOWED_CONTENT_TYPE: str = "application/pdf"

    # Background extraction
    EXTRACTION_MAX_WORKERS: int = 4
    RESUME_PENDING_ON_STARTUP: bool = True

    # Client-side polling
    POLL_INTERVAL_SECONDS: float = 3.0

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Observability
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    SENTRY_DSN: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
