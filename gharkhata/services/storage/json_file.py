"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document on disk holds every full key,
mirroring the browser's localStorage:
1. Users can open and read their data in any text editor
2. No database setup required
3. Backups are just a copy of the file

TRADEOFFS:
- The whole document is re-read on every access. That is what gives us
  "no stale reads": a statement always sees the latest committed write.
- Two processes writing at once means last write wins. There is no
  locking, exactly as with two browser tabs.

Writes are atomic (temp file + rename) and retried on OSError.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from gharkhata.logger import get_logger
from gharkhata.services.storage.interface import (
    DEFAULT_PREFIX,
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
)


logger = get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as one JSON object in a file.

    A missing file reads as empty. A corrupt file also reads as empty
    (and is logged); the next successful write replaces it.
    """

    def __init__(
        self,
        path: Union[str, Path],
        prefix: str = DEFAULT_PREFIX,
        write_attempts: int = 3,
        retry_wait_min: float = 0.1,
        retry_wait_max: float = 2.0,
    ):
        super().__init__(prefix)
        self._path = Path(path)
        self._write_attempts = max(1, write_attempts)
        self._retry_wait_min = retry_wait_min
        self._retry_wait_max = retry_wait_max

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageConnectionError(
                f"Cannot create data directory {self._path.parent}: {e}"
            )

    @property
    def path(self) -> Path:
        return self._path

    # -------------------------------------------------------------------------
    # Document I/O
    # -------------------------------------------------------------------------

    def _read_document(self) -> dict[str, Any]:
        """Read the whole document; problems read as empty."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.error("storage_load_failed", path=str(self._path), error=str(e))
            return {}

        if not raw.strip():
            return {}

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("storage_file_corrupt", path=str(self._path), error=str(e))
            return {}

        if not isinstance(document, dict):
            logger.error(
                "storage_file_corrupt",
                path=str(self._path),
                error=f"expected an object, got {type(document).__name__}",
            )
            return {}
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        """Atomically replace the document, retrying transient failures."""
        try:
            payload = json.dumps(document, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value is not JSON serializable: {e}")

        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(
                multiplier=self._retry_wait_min,
                min=self._retry_wait_min,
                max=self._retry_wait_max,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._replace_file(payload)
        except (OSError, RetryError) as e:
            logger.error("storage_save_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to write {self._path}: {e}")

    def _replace_file(self, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    # -------------------------------------------------------------------------
    # Raw operations
    # -------------------------------------------------------------------------

    def get_raw(self, full_key: str) -> Any:
        return self._read_document()[full_key]

    def set_raw(self, full_key: str, value: Any) -> None:
        document = self._read_document()
        document[full_key] = value
        self._write_document(document)

    def delete_raw(self, full_key: str) -> None:
        document = self._read_document()
        if full_key in document:
            del document[full_key]
            self._write_document(document)

    def keys(self) -> list[str]:
        return list(self._read_document().keys())

