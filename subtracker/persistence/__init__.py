"""Persistence package."""

from subtracker.persistence.adapter import (
    SUBSCRIPTIONS_KEY,
    SubscriptionPersistence,
    decode_subscriptions,
    encode_subscriptions,
)

__all__ = [
    "SUBSCRIPTIONS_KEY",
    "SubscriptionPersistence",
    "decode_subscriptions",
    "encode_subscriptions",
]
