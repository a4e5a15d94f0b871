"""
Data Models Package

This package contains all Pydantic models used in the Subscription Tracker.
Everything written to or read from storage conforms to these schemas.
"""

from subtracker.models.subscription import (
    LoadResult,
    LoadStatus,
    Subscription,
)
from subtracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Subscription models
    "LoadResult",
    "LoadStatus",
    "Subscription",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
