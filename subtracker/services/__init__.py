"""Services package."""

from subtracker.services.storage import (
    ConnectionError,
    FileKeyValueStore,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    InvalidKeyError,
    KeyValueStoreInterface,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "FileKeyValueStore",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "InvalidKeyError",
    "KeyValueStoreInterface",
    "StorageError",
]
