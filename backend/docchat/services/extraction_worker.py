"""
Background PDF extraction.

Each upload schedules one extraction task on a bounded thread pool. A task
moves its document from processing to ready or error exactly once; errors
inside a task are logged and recorded as status, never raised to a caller.

Flow:
1. Upload handler calls ``submit(document_id, data)`` and returns at once
2. A pool thread parses the PDF with ``PdfTextExtractor``
3. The document is marked ready (text + page count) or error
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from typing import Callable, Dict, Optional

from sqlalchemy.orm import Session

from docchat.core.metrics import EXTRACTIONS_IN_FLIGHT, track_extraction
from docchat.core.sentry import capture_exception
from docchat.services.document_store import (
    list_processing_documents,
    mark_error,
    mark_ready,
)
from docchat.services.storage_service import LocalStorageService
from docchat.services.text_extractor import PdfTextExtractor

logger = logging.getLogger(__name__)


class ExtractionWorker:
    """
    Bounded pool of extraction tasks.

    At most ``max_workers`` PDFs are parsed at once; further submissions
    queue inside the executor.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        extractor: Optional[PdfTextExtractor] = None,
        max_workers: int = 4,
    ) -> None:
        self.session_factory = session_factory
        self.extractor = extractor or PdfTextExtractor()
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="pdf-extract",
        )
        self._futures: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def submit(self, document_id: str, data: bytes) -> Future:
        """Schedule extraction for a document without waiting for it."""
        future = self._executor.submit(self.run_extraction, document_id, data)
        with self._lock:
            self._futures[document_id] = future
        future.add_done_callback(lambda f: self._forget(document_id, f))
        logger.info(f"Queued extraction for document {document_id}")
        return future

    def _forget(self, document_id: str, future: Future) -> None:
        with self._lock:
            if self._futures.get(document_id) is future:
                del self._futures[document_id]

    def run_extraction(self, document_id: str, data: bytes) -> bool:
        """
        Extract text and record the terminal status.

        Returns True if the document is now ready. Never raises.
        """
        EXTRACTIONS_IN_FLIGHT.inc()
        start_time = time.perf_counter()
        try:
            result = self.extractor.extract(data)
            with self.session_factory() as db:
                applied = mark_ready(db, document_id, result.text, result.page_count)

            duration = time.perf_counter() - start_time
            if not applied:
                # Deleted or already settled while we were parsing
                logger.warning(
                    f"Document {document_id} no longer processing; extraction result dropped"
                )
                track_extraction("skipped", duration)
                return False

            track_extraction("ready", duration, result.page_count)
            logger.info(
                f"PDF text extracted for document {document_id} "
                f"({result.page_count} pages in {duration:.2f}s)"
            )
            return True

        except Exception as e:
            logger.exception(f"PDF extraction error for {document_id}: {e}")
            capture_exception(e, tags={"document_id": document_id})
            self._record_failure(document_id)
            track_extraction("error", time.perf_counter() - start_time)
            return False

        finally:
            EXTRACTIONS_IN_FLIGHT.dec()

    def _record_failure(self, document_id: str) -> None:
        try:
            with self.session_factory() as db:
                if not mark_error(db, document_id):
                    logger.warning(
                        f"Document {document_id} no longer processing; error status not written"
                    )
        except Exception as e:
            logger.exception(f"Could not mark document {document_id} as error: {e}")

    def cancel(self, document_id: str) -> bool:
        """
        Cancel a queued extraction.

        Returns True if the task had not started and will never run. A task
        that is already running finishes with a no-op update.
        """
        with self._lock:
            future = self._futures.get(document_id)
        if future is None:
            return False
        cancelled = future.cancel()
        if cancelled:
            logger.info(f"Cancelled queued extraction for document {document_id}")
        return cancelled

    def is_pending(self, document_id: str) -> bool:
        """Whether an extraction for the document is queued or running."""
        with self._lock:
            future = self._futures.get(document_id)
        return future is not None and not future.done()

    def wait(self, document_id: str, timeout: Optional[float] = None) -> bool:
        """Block until the document's extraction finishes. Returns False on timeout."""
        with self._lock:
            future = self._futures.get(document_id)
        if future is None:
            return True
        done, _ = wait_futures([future], timeout=timeout)
        return bool(done)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted extraction finishes. Returns False on timeout."""
        with self._lock:
            futures = list(self._futures.values())
        _, not_done = wait_futures(futures, timeout=timeout)
        return not not_done

    def resume_pending(self, storage: LocalStorageService) -> int:
        """
        Resubmit documents left in processing by a previous process.

        A document whose blob is missing is marked error. Returns the number
        of documents resubmitted.
        """
        with self.session_factory() as db:
            pending = [(doc.id, doc.file_path) for doc in list_processing_documents(db)]

        resumed = 0
        for document_id, file_key in pending:
            if self.is_pending(document_id):
                continue
            data = storage.get_file(file_key)
            if data is None:
                logger.error(f"Blob {file_key} missing for document {document_id}")
                self._record_failure(document_id)
                continue
            self.submit(document_id, data)
            resumed += 1

        if resumed:
            logger.info(f"Resumed extraction for {resumed} pending documents")
        return resumed

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for running tasks."""
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
        logger.info("Extraction worker stopped")


# Lazy-loaded singleton
_extraction_worker: Optional[ExtractionWorker] = None
_worker_lock = threading.Lock()


def get_extraction_worker() -> ExtractionWorker:
    """Return the process-wide extraction worker, creating it on first use."""
    global _extraction_worker
    with _worker_lock:
        if _extraction_worker is None:
            from docchat.config import settings
            from docchat.db.session import SessionLocal

            _extraction_worker = ExtractionWorker(
                session_factory=SessionLocal,
                max_workers=settings.EXTRACTION_MAX_WORKERS,
            )
        return _extraction_worker


def shutdown_extraction_worker(wait: bool = True) -> None:
    """Stop the process-wide worker so the next call builds a fresh one."""
    global _extraction_worker
    with _worker_lock:
        worker, _extraction_worker = _extraction_worker, None
    if worker is not None:
        worker.shutdown(wait=wait)
