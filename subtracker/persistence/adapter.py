"""
Subscription Persistence

DESIGN DECISION: The whole collection is one value under one key.
Every save rewrites it completely; there is no partial update and no
migration step. This mirrors how a phone app would keep a small list in
its preferences store.

Failure policy:
- Reading never raises. Missing, corrupt or unreadable data all load
  as an empty list, and LoadResult.status says which one it was.
- Writing never raises. A failed write is logged and reported as False;
  the in-memory list stays as the user left it.
"""

from typing import Optional, Sequence

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from subtracker.audit import AuditLogger
from subtracker.models.subscription import LoadResult, LoadStatus, Subscription
from subtracker.services.storage import KeyValueStoreInterface, StorageError


SUBSCRIPTIONS_KEY = "subscriptions"

_COLLECTION = TypeAdapter(list[Subscription])


def encode_subscriptions(subscriptions: Sequence[Subscription]) -> bytes:
    """
    Serialize a collection to the stored JSON array.

    Each element is {"id", "name", "amount", "renewalDate"}.
    """
    return _COLLECTION.dump_json(list(subscriptions), by_alias=True)


def decode_subscriptions(blob: bytes) -> list[Subscription]:
    """
    Parse a stored JSON array back into subscriptions.

    Raises:
        ValueError: If the blob is not valid JSON or does not match
                    the schema (pydantic's ValidationError is a ValueError)
    """
    return _COLLECTION.validate_json(blob)


class SubscriptionPersistence:
    """
    Saves and loads the full subscription collection.

    Only ever touches SUBSCRIPTIONS_KEY in the given key-value store.
    """

    def __init__(
        self,
        storage: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def storage(self) -> KeyValueStoreInterface:
        return self._storage

    def save(self, subscriptions: Sequence[Subscription]) -> bool:
        """
        Write the whole collection, replacing what was stored.

        Returns:
            True if the backend accepted the write
        """
        try:
            blob = encode_subscriptions(subscriptions)
            self._storage.set(SUBSCRIPTIONS_KEY, blob)
        except (StorageError, PydanticSerializationError, ValueError) as e:
            self._audit_logger.log_save_failed(len(subscriptions), str(e))
            return False

        self._audit_logger.log_collection_saved(len(subscriptions), len(blob))
        return True

    def load_result(self) -> LoadResult:
        """
        Read the collection and explain the outcome.

        Returns:
            LoadResult with status LOADED, NOT_FOUND, CORRUPT or STORAGE_ERROR
        """
        try:
            blob = self._storage.get(SUBSCRIPTIONS_KEY)
        except StorageError as e:
            result = LoadResult(status=LoadStatus.STORAGE_ERROR, error_message=str(e))
            self._audit_logger.log_load_fell_back(result.status.value, result.error_message)
            return result

        if blob is None:
            result = LoadResult(status=LoadStatus.NOT_FOUND)
            self._audit_logger.log_collection_loaded(0, result.status.value)
            return result

        try:
            subscriptions = decode_subscriptions(blob)
        except ValueError as e:
            result = LoadResult(status=LoadStatus.CORRUPT, error_message=str(e))
            self._audit_logger.log_load_fell_back(result.status.value, result.error_message)
            return result

        result = LoadResult(status=LoadStatus.LOADED, subscriptions=subscriptions)
        self._audit_logger.log_collection_loaded(result.count, result.status.value)
        return result

    def load(self) -> list[Subscription]:
        """Read the collection; empty if nothing usable is stored."""
        return self.load_result().subscriptions
