"""
Main Orchestrator for Subscription Tracker

This module wires the components together and performs the one
start-up load:

    settings → key-value backend → persistence → record store → load

DESIGN DECISION: The store built here is the only owner of the
subscription list. The UI receives it by reference and never keeps a
list of its own.

If the configured backend cannot be built (for example, Google Sheets
credentials are missing) the app still starts, on in-memory storage,
and the problem is logged.
"""

from typing import Optional

from subtracker.audit import AuditLogger, configure_logging
from subtracker.config import get_settings
from subtracker.models.subscription import LoadResult
from subtracker.persistence import SubscriptionPersistence
from subtracker.services.storage import (
    FileKeyValueStore,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStoreInterface,
)
from subtracker.store import SubscriptionStore


def create_key_value_store(backend: str) -> KeyValueStoreInterface:
    """
    Build the key-value backend named in configuration.

    Raises:
        ValueError: For an unknown backend name
        Exception: Whatever the backend raises while being set up
    """
    settings = get_settings()

    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "file":
        return FileKeyValueStore(settings.storage.data_dir)
    if backend == "google_sheets":
        client = GoogleSheetsClient(settings.google_sheets)
        client.get_key_value_sheet()  # Fail now rather than on first save
        return GoogleSheetsKeyValueStore(client)

    raise ValueError(f"Unknown storage backend: {backend}")


def create_app_components(
    backend: Optional[str] = None,
    storage: Optional[KeyValueStoreInterface] = None,
) -> tuple[SubscriptionStore, LoadResult]:
    """
    Factory function to create the application state.

    Args:
        backend: Override for the configured storage backend.
        storage: Ready-made key-value store (takes precedence over backend).
                 Useful for tests.

    Returns:
        (store, load_result) - the store is already loaded
    """
    settings = get_settings()
    configure_logging(settings.app.effective_log_level)
    audit_logger = AuditLogger()

    if storage is None:
        backend = backend or settings.storage.backend
        try:
            storage = create_key_value_store(backend)
        except Exception as e:
            # Storage not usable - continue without persistence
            audit_logger.log_storage_backend_unavailable(backend, str(e))
            storage = InMemoryKeyValueStore()

    persistence = SubscriptionPersistence(storage, audit_logger)
    store = SubscriptionStore(persistence, audit_logger)
    load_result = store.load()

    return store, load_result
