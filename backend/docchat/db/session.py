"""
Database session configuration.

Provides SQLAlchemy engine and session factory for database operations.
"""

import logging
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from docchat.config import settings
from docchat.db.base import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """Create an engine with settings appropriate for the backend."""
    if database_url.startswith("sqlite"):
        # SQLite-specific settings
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            Path(database_url.replace("sqlite:///", "", 1)).parent.mkdir(
                parents=True, exist_ok=True
            )
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},  # Needed for SQLite
        )

    # PostgreSQL settings
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


engine = create_db_engine(settings.DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db(bind: Engine = engine) -> None:
    """Create all tables that don't exist yet."""
    # Import models so they register on Base.metadata
    import docchat.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info("Database tables checked/created")


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after use.

    Yields:
        Session: SQLAlchemy database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
