"""Record store package."""

from subtracker.store.record_store import SubscriptionStore

__all__ = ["SubscriptionStore"]
