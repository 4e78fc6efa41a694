"""
In-Memory Storage Implementation

Used by tests and by throwaway sessions (storage_backend=memory).
Values are deep-copied in and out so callers can never mutate stored
state by accident - the same guarantee a JSON round trip gives.
"""

import copy
from typing import Any, Optional

from gharkhata.services.storage.interface import (
    DEFAULT_PREFIX,
    KeyValueStoreInterface,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dictionary-backed key-value store."""

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        initial: Optional[dict[str, Any]] = None,
    ):
        super().__init__(prefix)
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get_raw(self, full_key: str) -> Any:
        return copy.deepcopy(self._data[full_key])

    def set_raw(self, full_key: str, value: Any) -> None:
        self._data[full_key] = copy.deepcopy(value)

    def delete_raw(self, full_key: str) -> None:
        self._data.pop(full_key, None)

    def keys(self) -> list[str]:
        return list(self._data.keys())
