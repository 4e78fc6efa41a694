"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The JSON file backend is the default; the in-memory one serves tests.
"""

from gharkhata.services.storage.interface import (
    DEFAULT_PREFIX,
    DEFAULT_PROFILE,
    KeyValueStoreInterface,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from gharkhata.services.storage.json_file import JsonFileKeyValueStore
from gharkhata.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interface
    "DEFAULT_PREFIX",
    "DEFAULT_PROFILE",
    "KeyValueStoreInterface",
    # Exceptions
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
