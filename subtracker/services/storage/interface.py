"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The app only needs what a phone's preferences store
offers: bytes in, bytes out, addressed by a string key. Keeping the
interface that small allows us to:
1. Use in-memory storage for testing
2. Keep subscriptions in a local directory by default
3. Put them in Google Sheets for people who want them in the cloud

Backends make no promise beyond "a single key write replaces the
previous value".
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for key-value storage.

    Any backend (local files, Google Sheets, etc.) must implement these
    methods. Failures are reported as StorageError subclasses.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored bytes, or None if the key has no value

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Store a value, replacing anything already under the key.

        Args:
            key: The key to write
            value: The bytes to store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: The key to remove

        Returns:
            True if a value was removed, False if there was none
        """
        pass

    def contains(self, key: str) -> bool:
        """Check whether a value is stored under the key."""
        return self.get(key) is not None


def validate_key(key: str) -> str:
    """Reject keys no backend can address."""
    if not isinstance(key, str) or not key:
        raise InvalidKeyError("Storage key must be a non-empty string")
    if "/" in key or "\\" in key or key in (".", ".."):
        raise InvalidKeyError(f"Storage key may not contain path separators: {key!r}")
    return key


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class InvalidKeyError(StorageError):
    """The key cannot be used with this backend."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
