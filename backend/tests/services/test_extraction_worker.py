"""
Unit tests for the background extraction worker.
"""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from docchat.models.document import Document, DocumentStatus
from docchat.services.extraction_worker import ExtractionWorker
from docchat.services import text_extractor
from docchat.services.text_extractor import ExtractionFailure, PdfExtractResult


@pytest.fixture
def processing_document(db, test_user, storage, make_pdf):
    """A processing document whose 2-page blob is in storage."""
    storage.upload_file(make_pdf(2), "1-notes.pdf")
    document = Document(
        user_id=test_user.id,
        name="notes",
        original_name="notes.pdf",
        file_path="1-notes.pdf",
        file_size=100,
        mime_type="application/pdf",
        status=DocumentStatus.PROCESSING,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


class TestRunExtraction:
    """Tests for the task body."""

    def test_success_marks_ready(self, worker, processing_document, make_pdf, reload_document):
        assert worker.run_extraction(processing_document.id, make_pdf(2)) is True

        stored = reload_document(processing_document.id)
        assert stored.status == DocumentStatus.READY
        assert stored.page_count == 2
        assert "Page 2" in stored.extracted_text

    def test_extraction_failure_marks_error(self, worker, processing_document, reload_document):
        assert worker.run_extraction(processing_document.id, b"not a pdf") is False

        stored = reload_document(processing_document.id)
        assert stored.status == DocumentStatus.ERROR
        assert stored.extracted_text is None

    def test_failing_status_update_marks_error(
        self, worker, processing_document, make_pdf, reload_document
    ):
        """If writing the ready state fails, the document still settles as error."""
        with patch(
            "docchat.services.extraction_worker.mark_ready",
            side_effect=RuntimeError("database went away"),
        ):
            assert worker.run_extraction(processing_document.id, make_pdf(1)) is False

        assert reload_document(processing_document.id).status == DocumentStatus.ERROR

    def test_never_raises_when_error_write_fails(self, session_factory):
        extractor = MagicMock()
        extractor.extract.side_effect = ExtractionFailure("broken")
        failing_worker = ExtractionWorker(session_factory, extractor=extractor, max_workers=1)

        with patch(
            "docchat.services.extraction_worker.mark_error",
            side_effect=RuntimeError("database went away"),
        ):
            assert failing_worker.run_extraction("doc-1", b"data") is False

        failing_worker.shutdown()

    def test_deleted_document_is_noop(self, worker, db, processing_document, make_pdf, reload_document):
        db.delete(processing_document)
        db.commit()

        assert worker.run_extraction(processing_document.id, make_pdf(1)) is False
        assert reload_document(processing_document.id) is None

    def test_settled_document_is_not_overwritten(
        self, worker, db, processing_document, make_pdf, reload_document
    ):
        processing_document.status = DocumentStatus.ERROR
        db.commit()

        assert worker.run_extraction(processing_document.id, make_pdf(1)) is False

        stored = reload_document(processing_document.id)
        assert stored.status == DocumentStatus.ERROR
        assert stored.extracted_text is None


class TestScheduling:
    """Tests for submit, cancel and wait."""

    def test_submit_runs_in_background(self, worker, processing_document, make_pdf, reload_document):
        future = worker.submit(processing_document.id, make_pdf(2))

        assert future.result(timeout=10) is True
        assert reload_document(processing_document.id).status == DocumentStatus.READY
        assert worker.is_pending(processing_document.id) is False

    def test_pool_is_bounded(self, session_factory, blocking_extractor, make_pdf):
        bounded = ExtractionWorker(session_factory, extractor=blocking_extractor, max_workers=1)
        try:
            first = bounded.submit("doc-1", make_pdf())
            second = bounded.submit("doc-2", make_pdf())
            assert blocking_extractor.started.wait(timeout=10)

            # Only one slot: the second task is still queued
            assert first.running()
            assert not second.running()
            assert bounded.is_pending("doc-2")
        finally:
            blocking_extractor.release.set()
            bounded.shutdown(wait=True)

    def test_cancel_queued_task(
        self, session_factory, blocking_extractor, processing_document, make_pdf, reload_document
    ):
        bounded = ExtractionWorker(session_factory, extractor=blocking_extractor, max_workers=1)
        try:
            bounded.submit("blocker", make_pdf())
            assert blocking_extractor.started.wait(timeout=10)
            queued = bounded.submit(processing_document.id, make_pdf())

            assert bounded.cancel(processing_document.id) is True
            assert queued.cancelled()
            assert reload_document(processing_document.id).status == DocumentStatus.PROCESSING
        finally:
            blocking_extractor.release.set()
            bounded.shutdown(wait=True)

    def test_cancel_unknown_document(self, worker):
        assert worker.cancel("nothing-here") is False

    def test_wait_for_unknown_document_returns_immediately(self, worker):
        assert worker.wait("nothing-here", timeout=0.1) is True

    def test_wait_times_out_while_blocked(self, session_factory, blocking_extractor, make_pdf):
        bounded = ExtractionWorker(session_factory, extractor=blocking_extractor, max_workers=1)
        try:
            bounded.submit("doc-1", make_pdf())
            assert blocking_extractor.started.wait(timeout=10)

            assert bounded.wait("doc-1", timeout=0.05) is False
            assert bounded.drain(timeout=0.05) is False

            blocking_extractor.release.set()
            assert bounded.drain(timeout=10) is True
        finally:
            blocking_extractor.release.set()
            bounded.shutdown(wait=True)


class TestResumePending:
    """Tests for the startup recovery sweep."""

    def test_resubmits_processing_documents(
        self, worker, storage, processing_document, reload_document
    ):
        assert worker.resume_pending(storage) == 1
        assert worker.drain(timeout=10)

        stored = reload_document(processing_document.id)
        assert stored.status == DocumentStatus.READY
        assert stored.page_count == 2

    def test_missing_blob_marks_error(self, worker, storage, processing_document, reload_document):
        storage.delete_file(processing_document.file_path)

        assert worker.resume_pending(storage) == 0
        assert reload_document(processing_document.id).status == DocumentStatus.ERROR

    def test_ignores_settled_documents(self, worker, storage, db, processing_document):
        processing_document.status = DocumentStatus.READY
        db.commit()

        assert worker.resume_pending(storage) == 0


class TestConcurrentExtraction:
    """Many documents extracted through a multi-thread pool."""

    def test_parallel_tasks_parse_one_at_a_time(
        self, session_factory, db, test_user, storage, make_pdf, reload_document
    ):
        documents = []
        payloads = {}
        for i in range(8):
            page_count = i % 3 + 1
            data = make_pdf(page_count, text=f"Document {i} page {{n}}")
            key = storage.upload_file(data, f"{i}-doc.pdf")
            document = Document(
                user_id=test_user.id,
                name=f"doc-{i}",
                original_name=f"doc-{i}.pdf",
                file_path=key,
                file_size=len(data),
                mime_type="application/pdf",
                status=DocumentStatus.PROCESSING,
            )
            db.add(document)
            db.commit()
            documents.append((document.id, i, page_count))
            payloads[document.id] = data

        real_open = text_extractor.fitz.open
        state = {"active": 0, "max_active": 0}
        state_lock = threading.Lock()

        def tracking_open(*args, **kwargs):
            with state_lock:
                state["active"] += 1
                state["max_active"] = max(state["max_active"], state["active"])
            try:
                time.sleep(0.02)
                return real_open(*args, **kwargs)
            finally:
                with state_lock:
                    state["active"] -= 1

        pool = ExtractionWorker(session_factory, max_workers=4)
        try:
            with patch.object(text_extractor.fitz, "open", side_effect=tracking_open):
                for document_id, data in payloads.items():
                    pool.submit(document_id, data)
                assert pool.drain(timeout=30)
        finally:
            pool.shutdown(wait=True)

        assert state["max_active"] == 1
        for document_id, i, page_count in documents:
            stored = reload_document(document_id)
            assert stored.status == DocumentStatus.READY
            assert stored.page_count == page_count
            assert f"Document {i} page {page_count}" in stored.extracted_text
