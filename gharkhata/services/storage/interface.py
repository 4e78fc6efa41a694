"""
Abstract Key-Value Storage Interface

DESIGN DECISION: Every ledger sits on one primitive - a namespaced
key-value store holding JSON values. This allows us to:
1. Keep the on-disk format identical to the browser version
2. Use in-memory storage for testing
3. Swap the JSON file for something sturdier later

DESIGN DECISION: The profile is an explicit argument on every call.
There is no process-wide "active profile"; whoever opens a ledger says
which household it belongs to.

Full keys look like: <prefix><profile>_<key>, e.g. gharkhata_default_milk.
The "short key" (<profile>_<key>) is what backups carry.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any


DEFAULT_PREFIX = "gharkhata_"
DEFAULT_PROFILE = "default"


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the namespaced key-value store.

    Any storage implementation must implement the raw operations;
    the profile-aware helpers are shared.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def make_key(self, profile_id: str, key: str) -> str:
        """Build the full key for a logical key in a profile."""
        profile = str(profile_id) if profile_id else DEFAULT_PROFILE
        return f"{self._prefix}{profile}_{key}"

    def short_key(self, full_key: str) -> str:
        return full_key[len(self._prefix):]

    # -------------------------------------------------------------------------
    # Raw operations (full keys)
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_raw(self, full_key: str) -> Any:
        """
        Read the value stored under a full key.

        Raises:
            KeyError: If nothing is stored under the key
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_raw(self, full_key: str, value: Any) -> None:
        """
        Store a JSON-serializable value under a full key.

        Raises:
            StorageError: If the value cannot be persisted
        """
        pass

    @abstractmethod
    def delete_raw(self, full_key: str) -> None:
        """Remove a full key. Missing keys are ignored."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All full keys currently stored (any prefix)."""
        pass

    # -------------------------------------------------------------------------
    # Profile-aware helpers
    # -------------------------------------------------------------------------

    def load(self, profile_id: str, key: str, fallback: Any = None) -> Any:
        """
        Load a value, or the fallback when missing or unreadable.

        Unreadable content is logged by the backend, never raised, so a
        damaged key cannot lock the user out of the rest of their data.
        """
        try:
            return self.get_raw(self.make_key(profile_id, key))
        except KeyError:
            return copy.deepcopy(fallback)

    def save(self, profile_id: str, key: str, value: Any) -> None:
        """Persist a value for a profile."""
        self.set_raw(self.make_key(profile_id, key), value)

    def remove(self, profile_id: str, key: str) -> None:
        self.delete_raw(self.make_key(profile_id, key))

    def dump(self) -> dict[str, Any]:
        """Every application key, by short key. Used for backups."""
        data = {}
        for full_key in self.keys():
            if not full_key.startswith(self._prefix):
                continue
            try:
                data[self.short_key(full_key)] = self.get_raw(full_key)
            except KeyError:
                continue
        return data

    def restore(self, short_key: str, value: Any) -> None:
        """Write a value back under its short key."""
        self.set_raw(f"{self._prefix}{short_key}", value)

    def clear(self) -> int:
        """
        Remove every key owned by this application.

        Returns:
            Number of keys removed
        """
        owned = [k for k in self.keys() if k.startswith(self._prefix)]
        for full_key in owned:
            self.delete_raw(full_key)
        return len(owned)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not open the storage backend."""
    pass
