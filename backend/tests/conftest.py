"""
Pytest fixtures for backend tests.

Provides common test fixtures for database, client, storage, the extraction
worker and authentication.
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway locations first
_TEST_ROOT = tempfile.mkdtemp(prefix="docchat-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT}/app.db"
os.environ["UPLOAD_DIR"] = f"{_TEST_ROOT}/uploads"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESUME_PENDING_ON_STARTUP"] = "false"

import threading
from typing import Callable, Generator

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from docchat.main import app
from docchat.api.deps import get_storage, get_worker
from docchat.core.rate_limiter import limiter
from docchat.core.security import get_password_hash, create_access_token
from docchat.db.base import Base
from docchat.db.session import get_db
from docchat.models.document import Document
from docchat.models.user import User
from docchat.services.extraction_worker import ExtractionWorker
from docchat.services.storage_service import LocalStorageService
from docchat.services.text_extractor import PdfTextExtractor, _fitz_lock

limiter.enabled = False


def build_pdf(page_count: int = 1, text: str = "Page {n} of the test document") -> bytes:
    """Build a real PDF with one line of text per page."""
    with _fitz_lock:
        pdf = fitz.open()
        for n in range(1, page_count + 1):
            page = pdf.new_page()
            page.insert_text((72, 72), text.format(n=n))
        data = pdf.tobytes()
        pdf.close()
    return data


class BlockingExtractor(PdfTextExtractor):
    """Extractor that waits for ``release`` before parsing."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()

    def extract(self, data: bytes):
        self.started.set()
        self.release.wait(timeout=10)
        return super().extract(data)


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """
    Create a fresh SQLite database file for each test.

    A file (not :memory:) so worker threads get their own connections.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    """Session factory bound to the test database."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Generator[Session, None, None]:
    """
    Test database session for arranging data and asserting on it.

    Yields:
        Session: Test database session.
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def storage(tmp_path) -> LocalStorageService:
    """Blob storage in a per-test directory."""
    return LocalStorageService(base_path=str(tmp_path / "uploads"))


@pytest.fixture(scope="function")
def worker(session_factory) -> Generator[ExtractionWorker, None, None]:
    """Extraction worker writing to the test database."""
    extraction_worker = ExtractionWorker(session_factory=session_factory, max_workers=2)
    yield extraction_worker
    extraction_worker.shutdown(wait=True)


@pytest.fixture(scope="function")
def client(
    session_factory,
    storage: LocalStorageService,
    worker: ExtractionWorker,
) -> Generator[TestClient, None, None]:
    """
    Create a test client with database, storage and worker overrides.

    Each request gets its own session, as in production.
    """

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_worker] = lambda: worker

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _create_user(db: Session, name: str, email: str) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash("testpassword123"),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db: Session) -> User:
    """Create a test user."""
    return _create_user(db, "Test User", "test@example.com")


@pytest.fixture(scope="function")
def other_user(db: Session) -> User:
    """Create a second user who must never see test_user's documents."""
    return _create_user(db, "Other User", "other@example.com")


@pytest.fixture(scope="function")
def auth_headers(test_user: User) -> dict:
    """Authorization headers with a JWT for test_user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def other_auth_headers(other_user: User) -> dict:
    """Authorization headers with a JWT for other_user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Factory for real PDF bytes."""
    return build_pdf


@pytest.fixture
def reload_document(db: Session) -> Callable[[str], Document]:
    """Read a document fresh from the database, bypassing the identity map."""

    def _reload(document_id: str):
        db.expire_all()
        return db.get(Document, document_id)

    return _reload


@pytest.fixture
def blocking_extractor() -> Generator[BlockingExtractor, None, None]:
    """Extractor held until the test sets ``release``."""
    extractor = BlockingExtractor()
    yield extractor
    extractor.release.set()
