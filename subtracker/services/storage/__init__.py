"""
Storage Services Package

Provides the abstract key-value interface and its backends.
Local files are the default; Google Sheets is optional.
"""

from subtracker.services.storage.interface import (
    ConnectionError,
    InvalidKeyError,
    KeyValueStoreInterface,
    StorageError,
    validate_key,
)
from subtracker.services.storage.local import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
)
from subtracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    "validate_key",
    # Exceptions
    "ConnectionError",
    "InvalidKeyError",
    "StorageError",
    # Local implementations
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
]
