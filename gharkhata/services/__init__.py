"""Persistence and backup services."""

from gharkhata.services.backup import BackupFormatError, BackupService
from gharkhata.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageError,
)

__all__ = [
    "BackupFormatError",
    "BackupService",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "StorageError",
]
