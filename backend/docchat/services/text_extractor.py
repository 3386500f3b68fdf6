"""
PDF text extraction.

Uses PyMuPDF to turn raw PDF bytes into plain text and a page count.
The whole document is parsed in memory.
"""

import logging
import threading
from dataclasses import dataclass

# TODO: switch to `import pymupdf`; PyMuPDF 1.24+ warns that the fitz alias is deprecated
import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

# PyMuPDF is not thread-safe: only one thread may use it at a time
_fitz_lock = threading.Lock()


class ExtractionFailure(Exception):
    """Raised when bytes are not a parseable, readable PDF."""


@dataclass
class PdfExtractResult:
    """Text and page count extracted from a PDF."""

    text: str
    page_count: int


class PdfTextExtractor:
    """Extract plain text from PDF bytes."""

    def extract(self, data: bytes) -> PdfExtractResult:
        """
        Extract text from every page of a PDF.

        Args:
            data: Raw PDF bytes.

        Returns:
            PdfExtractResult with page texts joined by newlines.

        Raises:
            ExtractionFailure: If the data is empty, corrupt, encrypted,
                or has no pages.
        """
        if not data:
            raise ExtractionFailure("Empty document")

        with _fitz_lock:
            return self._extract_locked(data)

    def _extract_locked(self, data: bytes) -> PdfExtractResult:
        try:
            pdf_document = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise ExtractionFailure(f"Could not open PDF: {e}") from e

        try:
            if pdf_document.needs_pass:
                raise ExtractionFailure("PDF is password protected")

            page_count = pdf_document.page_count
            if page_count == 0:
                raise ExtractionFailure("PDF has no pages")

            try:
                page_texts = [page.get_text() for page in pdf_document]
            except Exception as e:
                raise ExtractionFailure(f"Could not read PDF pages: {e}") from e
        finally:
            pdf_document.close()

        text = "\n".join(page_texts)
        logger.info(f"Extracted {len(text)} characters from {page_count} pages")
        return PdfExtractResult(text=text, page_count=page_count)
