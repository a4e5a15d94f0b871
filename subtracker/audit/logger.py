"""
Audit Logger

DESIGN DECISION: Every change to the subscription list is logged,
and so is every silent fallback. The user never sees a load or save
failure, so the log is the only place they are recorded.

The audit logger:
- Writes structured JSON through structlog
- Never raises (a broken log must not break adding a subscription)
"""

import logging
import sys
from typing import Any, Callable, Optional
from uuid import UUID

import structlog

from subtracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog for JSON output.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Events are routed to the structured logger by severity.
    """

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize audit logger.

        Args:
            logger: A structlog-compatible logger.
                    If None, the "subtracker.audit" logger is used.
        """
        self._logger = logger or structlog.get_logger("subtracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was handed to the logger.
        """
        try:
            log_dict = event.to_log_dict()
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Last resort: the log itself is broken
            print(f"WARNING: Failed to write audit event {event.event_id}: {e}", file=sys.stderr)
            return False

        return True

    def _emit(self, build: Callable[..., AuditEvent], *args: Any) -> bool:
        """Build an event and log it. Builder failures are reported, not raised."""
        try:
            event = build(*args)
        except Exception as e:
            try:
                self._logger.error("audit_event_build_failed", builder=build.__name__, error=str(e))
            except Exception:
                print(f"WARNING: Failed to build audit event {build.__name__}: {e}", file=sys.stderr)
            return False
        return self.log(event)

    def log_subscription_added(self, subscription_id: UUID, name: str, amount: float) -> None:
        self._emit(AuditEventBuilder.subscription_added, subscription_id, name, amount)

    def log_subscription_rejected(self, name: str, raw_amount: Any) -> None:
        self._emit(AuditEventBuilder.subscription_rejected, name, raw_amount)

    def log_subscriptions_removed(self, subscription_ids: list[UUID], positions: list[int]) -> None:
        self._emit(AuditEventBuilder.subscriptions_removed, subscription_ids, positions)

    def log_invalid_positions(self, positions: list[int], collection_size: int) -> None:
        self._emit(AuditEventBuilder.invalid_positions_ignored, positions, collection_size)

    def log_collection_loaded(self, count: int, status: str) -> None:
        self._emit(AuditEventBuilder.collection_loaded, count, status)

    def log_load_fell_back(self, status: str, error_message: Optional[str]) -> None:
        self._emit(AuditEventBuilder.load_fell_back, status, error_message)

    def log_collection_saved(self, count: int, size_bytes: int) -> None:
        self._emit(AuditEventBuilder.collection_saved, count, size_bytes)

    def log_save_failed(self, count: int, error_message: str) -> None:
        self._emit(AuditEventBuilder.save_failed, count, error_message)

    def log_storage_backend_unavailable(self, backend: str, error_message: str) -> None:
        self._emit(AuditEventBuilder.storage_backend_unavailable, backend, error_message)
