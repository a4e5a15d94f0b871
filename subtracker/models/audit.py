"""
Audit Models for Subscription Tracker

Every change to the subscription list, and every time the app had to
fall back to an empty list, produces an audit event. Events go to the
structured log; they are not persisted next to the subscriptions.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record store
    SUBSCRIPTION_ADDED = "subscription_added"
    SUBSCRIPTION_REJECTED = "subscription_rejected"
    SUBSCRIPTIONS_REMOVED = "subscriptions_removed"
    INVALID_POSITIONS_IGNORED = "invalid_positions_ignored"

    # Persistence
    COLLECTION_LOADED = "collection_loaded"
    LOAD_FELL_BACK = "load_fell_back"
    COLLECTION_SAVED = "collection_saved"
    SAVE_FAILED = "save_failed"

    # System events
    STORAGE_BACKEND_UNAVAILABLE = "storage_backend_unavailable"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which subscription, if any
    entity_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.subscription_added(subscription_id, name, amount)
        event = AuditEventBuilder.load_fell_back(status, error_message)
    """

    @staticmethod
    def subscription_added(
        subscription_id: UUID,
        name: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_ADDED,
            entity_id=subscription_id,
            description="Subscription added",
            details={
                "name": name,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def subscription_rejected(
        name: str,
        raw_amount: Any,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Subscription not added: amount is not a number",
            details={
                "name": name,
                "raw_amount": str(raw_amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def subscriptions_removed(
        subscription_ids: list[UUID],
        positions: list[int],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTIONS_REMOVED,
            description=f"Removed {len(subscription_ids)} subscription(s)",
            details={
                "subscription_ids": [str(s) for s in subscription_ids],
                "positions": positions,
            },
            is_user_action=True,
        )

    @staticmethod
    def invalid_positions_ignored(
        positions: list[int],
        collection_size: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_POSITIONS_IGNORED,
            severity=AuditSeverity.WARNING,
            description=f"Ignored {len(positions)} position(s) outside the list",
            details={
                "positions": positions,
                "collection_size": collection_size,
            },
        )

    @staticmethod
    def collection_loaded(
        count: int,
        status: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_LOADED,
            description=f"Loaded {count} subscription(s)",
            details={
                "count": count,
                "status": status,
            },
        )

    @staticmethod
    def load_fell_back(
        status: str,
        error_message: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FELL_BACK,
            severity=AuditSeverity.WARNING,
            description=f"Stored subscriptions unreadable ({status}), starting empty",
            details={
                "status": status,
            },
            error_message=error_message,
        )

    @staticmethod
    def collection_saved(
        count: int,
        size_bytes: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_SAVED,
            severity=AuditSeverity.DEBUG,
            description=f"Saved {count} subscription(s)",
            details={
                "count": count,
                "size_bytes": size_bytes,
            },
        )

    @staticmethod
    def save_failed(
        count: int,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Could not write subscriptions to storage",
            details={
                "count": count,
            },
            error_message=error_message,
        )

    @staticmethod
    def storage_backend_unavailable(
        backend: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_BACKEND_UNAVAILABLE,
            severity=AuditSeverity.ERROR,
            description="Storage backend unavailable, using in-memory storage",
            details={
                "backend": backend,
            },
            error_message=error_message,
        )
