"""
HTTP client for the documents API.

Thin wrapper over httpx used by the status poller and the CLI.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class DocumentsClientError(Exception):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class DocumentsClient:
    """Authenticated client for ``/documents``."""

    def __init__(
        self,
        base_url: str,
        token: str,
        api_prefix: str = "/api",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + api_prefix,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DocumentsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        if response.is_success:
            return response.json()
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        raise DocumentsClientError(response.status_code, str(detail))

    def list_documents(self) -> List[Dict[str, Any]]:
        """Fetch the caller's documents, newest first."""
        return self._json(self._client.get("/documents"))["documents"]

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """Fetch one document including its extracted text."""
        return self._json(self._client.get(f"/documents/{document_id}"))["document"]

    def upload(self, path: Path, content_type: str = "application/pdf") -> Dict[str, Any]:
        """Upload a file and return the new document summary."""
        path = Path(path)
        with path.open("rb") as fh:
            response = self._client.post(
                "/documents",
                files={"file": (path.name, fh, content_type)},
            )
        return self._json(response)["document"]

    def delete_document(self, document_id: str) -> None:
        """Delete one document."""
        self._json(self._client.delete(f"/documents/{document_id}"))
