"""
Storage service for uploaded PDF bytes.

Files live in one flat directory, keyed by a generated filename.
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional

from docchat.config import settings

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


class StorageError(RuntimeError):
    """Raised when a blob cannot be written or removed."""


class LocalStorageService:
    """
    Local filesystem storage service.

    No per-user namespace and no subdirectory sharding: every key is a
    plain filename inside ``base_path``.
    """

    def __init__(self, base_path: Optional[str] = None) -> None:
        """Initialize local storage."""
        self.base_path = Path(base_path or settings.UPLOAD_DIR)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Using local storage at: {self.base_path}")

    def generate_file_key(self, filename: str) -> str:
        """
        Generate a storage key from the current time and the filename.

        Keys are ``<epoch millis>-<sanitized name>``. Two uploads of the same
        name within the same millisecond collide.
        """
        timestamp = int(time.time() * 1000)
        safe_name = UNSAFE_FILENAME_CHARS.sub("_", filename)
        return f"{timestamp}-{safe_name}"

    def _path_for(self, file_key: str) -> Path:
        # Keys are flat filenames; refuse anything that would escape base_path
        if not file_key or Path(file_key).name != file_key:
            raise StorageError(f"Invalid file key: {file_key!r}")
        return self.base_path / file_key

    def upload_file(self, data: bytes, file_key: str) -> str:
        """Write bytes under ``file_key`` and return the key."""
        file_path = self._path_for(file_key)
        try:
            file_path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to save file: {e}") from e

        logger.info(f"File saved locally: {file_path}")
        return file_key

    def get_file(self, file_key: str) -> Optional[bytes]:
        """Get file content, or None if the blob does not exist."""
        file_path = self._path_for(file_key)
        if file_path.exists():
            return file_path.read_bytes()
        return None

    def delete_file(self, file_key: str) -> None:
        """Delete a blob. A missing file is not an error."""
        file_path = self._path_for(file_key)
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}") from e
        logger.info(f"File deleted: {file_path}")


# Lazy-loaded singleton
_storage_service: Optional[LocalStorageService] = None


def get_storage_service() -> LocalStorageService:
    """Return the process-wide storage service, creating it on first use."""
    global _storage_service
    if _storage_service is None:
        _storage_service = LocalStorageService()
    return _storage_service
