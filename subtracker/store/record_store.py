"""
Subscription Record Store

The single owner of the subscription list. Screens get a reference to
the store and go through it for every change; nothing else holds the
list.

GUARANTEES:
- New subscriptions are appended, so the list is in insertion order
- Every successful add or remove is followed by exactly one full save,
  made before the change is logged
- Bad input never raises; it just does not change anything
- Mutations are serialized by a lock, so two Streamlit sessions sharing
  the store cannot interleave a change and its save
"""

import threading
from datetime import date, datetime
from typing import Iterable, Iterator, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from subtracker.audit import AuditLogger
from subtracker.models.subscription import LoadResult, Subscription
from subtracker.persistence import SubscriptionPersistence
from subtracker.validation import parse_amount


class SubscriptionStore:
    """
    In-memory ordered collection of subscriptions with write-through saves.
    """

    def __init__(
        self,
        persistence: SubscriptionPersistence,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._persistence = persistence
        self._audit_logger = audit_logger or AuditLogger()
        self._subscriptions: list[Subscription] = []
        self._lock = threading.RLock()
        self._last_load: Optional[LoadResult] = None

    @property
    def last_load(self) -> Optional[LoadResult]:
        """Result of the start-up load, if it has happened."""
        return self._last_load

    def load(self) -> LoadResult:
        """
        Replace the in-memory list with what is stored.

        Called once at start-up. Never raises; see LoadResult.status
        for why the list might be empty.
        """
        with self._lock:
            result = self._persistence.load_result()
            self._subscriptions = list(result.subscriptions)
            self._last_load = result
            return result

    def add(
        self,
        name: str,
        amount: Union[str, int, float],
        renewal_date: Optional[date] = None,
    ) -> Optional[Subscription]:
        """
        Log a new subscription at the end of the list.

        Args:
            name: Display name, taken as given
            amount: The amount as typed (text) or as a number
            renewal_date: Next renewal; today if not given

        Returns:
            The new subscription, or None if the amount is not a number
            or the name cannot be stored
        """
        amount_value = parse_amount(amount)
        if amount_value is None:
            self._audit_logger.log_subscription_rejected(name, amount)
            return None

        if renewal_date is None:
            renewal_date = date.today()
        elif isinstance(renewal_date, datetime):
            renewal_date = renewal_date.date()

        try:
            subscription = Subscription(
                name=name,
                amount=amount_value,
                renewal_date=renewal_date,
            )
        except ValidationError:
            self._audit_logger.log_subscription_rejected(name, amount)
            return None

        with self._lock:
            self._subscriptions.append(subscription)
            self._persistence.save(self._subscriptions)

        self._audit_logger.log_subscription_added(
            subscription.id, subscription.name, subscription.amount
        )
        return subscription

    def remove(self, positions: Iterable[int]) -> list[Subscription]:
        """
        Delete the subscriptions at the given 0-based positions.

        All positions refer to the list as it is when the call starts and
        are removed in one step, followed by one save. Positions outside
        the list are ignored.

        Returns:
            The removed subscriptions, in their former order
        """
        with self._lock:
            size = len(self._subscriptions)
            wanted = set(positions)
            valid = sorted(p for p in wanted if 0 <= p < size)
            invalid = sorted(wanted.difference(valid))

            if invalid:
                self._audit_logger.log_invalid_positions(invalid, size)
            if not valid:
                return []

            doomed = set(valid)
            removed = [self._subscriptions[p] for p in valid]
            self._subscriptions = [
                s for i, s in enumerate(self._subscriptions) if i not in doomed
            ]

            self._persistence.save(self._subscriptions)

        self._audit_logger.log_subscriptions_removed([s.id for s in removed], valid)
        return removed

    def remove_ids(self, ids: Iterable[UUID]) -> list[Subscription]:
        """
        Delete the subscriptions with the given ids.

        Ids are matched against the list as it is when the lock is taken,
        so a delete chosen from an older snapshot never hits a record that
        has since moved into the same position. Unknown ids are ignored.
        """
        wanted = set(ids)
        with self._lock:
            positions = [
                i for i, s in enumerate(self._subscriptions) if s.id in wanted
            ]
            if not positions:
                return []
            return self.remove(positions)

    def all(self) -> tuple[Subscription, ...]:
        """Snapshot of the list in display order."""
        with self._lock:
            return tuple(self._subscriptions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def __iter__(self) -> Iterator[Subscription]:
        return iter(self.all())
