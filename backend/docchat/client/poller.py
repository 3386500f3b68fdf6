"""
Client-side status polling.

Re-fetches the whole document list on a fixed interval while any document
is still processing. There is no backoff and, unless a timeout is given,
no cap on how long polling runs.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from docchat.client.documents_client import DocumentsClient
from docchat.config import settings

logger = logging.getLogger(__name__)

PROCESSING = "processing"

DocumentList = List[Dict[str, Any]]


class PollTimeout(Exception):
    """Raised when documents are still processing after the timeout."""

    def __init__(self, documents: DocumentList):
        super().__init__("Documents still processing after timeout")
        self.documents = documents


def has_processing(documents: DocumentList) -> bool:
    """Whether any document in the list is still processing."""
    return any(doc.get("status") == PROCESSING for doc in documents)


class StatusPoller:
    """Poll the document list until nothing is processing."""

    def __init__(
        self,
        client: DocumentsClient,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.interval = settings.POLL_INTERVAL_SECONDS if interval is None else interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def poll_until_settled(
        self,
        on_update: Optional[Callable[[DocumentList], None]] = None,
    ) -> DocumentList:
        """
        Fetch the list, then keep re-fetching every ``interval`` seconds
        while any document is processing.

        Args:
            on_update: Called with every fetched list.

        Returns:
            The first list in which no document is processing.

        Raises:
            PollTimeout: If a timeout was set and it elapsed first.
        """
        started = self._clock()
        polls = 0
        while True:
            documents = self.client.list_documents()
            polls += 1
            if on_update is not None:
                on_update(documents)

            if not has_processing(documents):
                logger.debug(f"Documents settled after {polls} polls")
                return documents

            if self.timeout is not None and self._clock() - started >= self.timeout:
                raise PollTimeout(documents)

            self._sleep(self.interval)
