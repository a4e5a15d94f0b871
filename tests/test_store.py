"""Tests for the subscription record store."""

import threading
from datetime import date, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from subtracker.audit import AuditLogger
from subtracker.models.subscription import LoadStatus
from subtracker.persistence import (
    SUBSCRIPTIONS_KEY,
    SubscriptionPersistence,
    decode_subscriptions,
)
from subtracker.services.storage import InMemoryKeyValueStore, StorageError
from subtracker.store import SubscriptionStore


TODAY = date(2026, 10, 18)


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger():
    return MagicMock()


@pytest.fixture
def store(storage, audit_logger):
    store = SubscriptionStore(SubscriptionPersistence(storage, audit_logger), audit_logger)
    store.load()
    return store


def stored(storage):
    return decode_subscriptions(storage.get(SUBSCRIPTIONS_KEY))


def names(store):
    return [s.name for s in store.all()]


class TestAdd:
    """Tests for SubscriptionStore.add."""

    def test_add_returns_new_subscription(self, store):
        sub = store.add("Netflix", "15.49", TODAY)

        assert sub is not None
        assert sub.name == "Netflix"
        assert sub.amount == 15.49
        assert sub.renewal_date == TODAY
        assert store.all() == (sub,)

    def test_add_appends_at_end(self, store):
        store.add("A", "1", TODAY)
        store.add("B", "2", TODAY)
        store.add("C", "3", TODAY)
        assert names(store) == ["A", "B", "C"]

    def test_add_saves_whole_collection(self, store, storage):
        store.add("A", "1", TODAY)
        store.add("B", "2", TODAY)
        assert stored(storage) == list(store.all())

    def test_malformed_amount_is_rejected(self, store, storage, audit_logger):
        store.add("A", "1", TODAY)
        before = store.all()

        assert store.add("Netflix", "abc", TODAY) is None

        assert store.all() == before
        assert stored(storage) == list(before)
        audit_logger.log_subscription_rejected.assert_called_once_with("Netflix", "abc")

    def test_rejected_add_does_not_write(self, store, storage):
        assert store.add("Netflix", "abc", TODAY) is None
        assert storage.get(SUBSCRIPTIONS_KEY) is None

    def test_renewal_date_defaults_to_today(self, store):
        sub = store.add("Netflix", "15.49")
        assert sub.renewal_date == date.today()

    def test_datetime_is_reduced_to_date(self, store):
        sub = store.add("Netflix", "15.49", datetime(2026, 10, 18, 23, 59))
        assert sub.renewal_date == TODAY

    def test_duplicates_are_allowed(self, store):
        a = store.add("Spotify", "9.99", TODAY)
        b = store.add("Spotify", "9.99", TODAY)
        assert len(store) == 2
        assert a.id != b.id

    def test_numeric_amount(self, store):
        assert store.add("Gym", 30, TODAY).amount == 30.0

    def test_save_failure_keeps_in_memory_change(self, audit_logger):
        class ReadOnlyStore(InMemoryKeyValueStore):
            def set(self, key, value):
                raise StorageError("read-only")

        store = SubscriptionStore(SubscriptionPersistence(ReadOnlyStore(), audit_logger), audit_logger)
        store.load()

        assert store.add("Netflix", "15.49", TODAY) is not None
        assert names(store) == ["Netflix"]
        audit_logger.log_save_failed.assert_called_once()


class TestRemove:
    """Tests for SubscriptionStore.remove."""

    @pytest.fixture
    def abcd(self, store):
        for name in "ABCD":
            store.add(name, "1", TODAY)
        return store

    def test_multi_delete(self, abcd, storage):
        removed = abcd.remove({1, 3})

        assert names(abcd) == ["A", "C"]
        assert [s.name for s in removed] == ["B", "D"]
        assert stored(storage) == list(abcd.all())

    def test_single_delete(self, abcd):
        abcd.remove([0])
        assert names(abcd) == ["B", "C", "D"]

    def test_positions_refer_to_order_at_call_time(self, abcd):
        # Removing 0 must not shift 1 onto C
        abcd.remove([1, 0])
        assert names(abcd) == ["C", "D"]

    def test_duplicate_positions_count_once(self, abcd):
        abcd.remove([2, 2, 2])
        assert names(abcd) == ["A", "B", "D"]

    def test_remove_everything(self, abcd, storage):
        abcd.remove(range(4))
        assert abcd.all() == ()
        assert stored(storage) == []

    def test_out_of_range_positions_are_ignored(self, abcd, audit_logger):
        removed = abcd.remove({1, 7, -1})

        assert [s.name for s in removed] == ["B"]
        assert names(abcd) == ["A", "C", "D"]
        audit_logger.log_invalid_positions.assert_called_once_with([-1, 7], 4)

    def test_nothing_to_remove_does_not_save(self, abcd):
        persistence = MagicMock()
        abcd._persistence = persistence

        assert abcd.remove([]) == []
        assert abcd.remove({10}) == []
        persistence.save.assert_not_called()

    def test_exactly_one_save_per_remove(self, abcd):
        persistence = MagicMock()
        abcd._persistence = persistence

        abcd.remove({0, 1, 2})

        persistence.save.assert_called_once()


class TestLoadAndSnapshot:
    """Tests for start-up load and read access."""

    def test_store_reloads_what_it_saved(self, store, storage, audit_logger):
        store.add("A", "1", TODAY)
        store.add("B", "2.5", TODAY)

        reopened = SubscriptionStore(SubscriptionPersistence(storage, audit_logger), audit_logger)
        result = reopened.load()

        assert result.status == LoadStatus.LOADED
        assert reopened.all() == store.all()
        assert reopened.last_load is result

    def test_corrupt_storage_starts_empty(self, storage, audit_logger):
        storage.set(SUBSCRIPTIONS_KEY, b"{{{")
        store = SubscriptionStore(SubscriptionPersistence(storage, audit_logger), audit_logger)

        result = store.load()

        assert result.status == LoadStatus.CORRUPT
        assert store.all() == ()

    def test_all_is_a_snapshot(self, store):
        store.add("A", "1", TODAY)
        snapshot = store.all()
        store.add("B", "1", TODAY)

        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)
        assert [s.name for s in store] == ["A", "B"]


class TestRemoveById:
    """Tests for SubscriptionStore.remove_ids."""

    @pytest.fixture
    def abcd(self, store):
        for name in "ABCD":
            store.add(name, "1", TODAY)
        return store

    def test_removes_matching_ids(self, abcd, storage):
        a, b, c, d = abcd.all()

        removed = abcd.remove_ids([d.id, b.id])

        assert removed == [b, d]
        assert names(abcd) == ["A", "C"]
        assert stored(storage) == list(abcd.all())

    def test_unknown_ids_are_ignored(self, abcd):
        persistence = MagicMock()
        abcd._persistence = persistence

        assert abcd.remove_ids([uuid4()]) == []
        assert len(abcd) == 4
        persistence.save.assert_not_called()

    def test_list_changed_after_snapshot(self, abcd):
        # Another session deletes A after this one rendered its list,
        # so C now sits where B was
        snapshot = abcd.all()
        abcd.remove([0])

        removed = abcd.remove_ids([snapshot[1].id])

        assert [s.name for s in removed] == ["B"]
        assert names(abcd) == ["C", "D"]

    def test_already_removed_id_removes_nothing(self, abcd):
        b = abcd.all()[1]
        abcd.remove_ids([b.id])

        assert abcd.remove_ids([b.id]) == []
        assert names(abcd) == ["A", "C", "D"]


class TestWithRealAuditLogger:
    """
    The store and persistence wired to a real AuditLogger.

    Only the structlog logger underneath is mocked, so event building and
    validation run for real.
    """

    @pytest.fixture
    def real_audit_logger(self):
        return AuditLogger(logger=MagicMock())

    @pytest.fixture
    def real_store(self, storage, real_audit_logger):
        store = SubscriptionStore(
            SubscriptionPersistence(storage, real_audit_logger), real_audit_logger
        )
        store.load()
        return store

    @pytest.mark.parametrize("name", [
        "N" * 500,
        "x" * 5000,
        "",
        "Ñetflix 日本語 🎬",
        "<b>Gym</b> & \"Spa\"",
    ])
    def test_any_storable_name_is_added_and_saved(self, real_store, storage, name):
        sub = real_store.add(name, "9.99", TODAY)

        assert sub is not None
        assert sub.name == name
        assert stored(storage) == list(real_store.all())

    def test_unencodable_name_is_rejected_without_raising(self, real_store, storage):
        real_store.add("A", "1", TODAY)
        before = real_store.all()

        assert real_store.add("bad\ud800", "1", TODAY) is None

        assert real_store.all() == before
        assert stored(storage) == list(before)

    def test_huge_amount_is_rejected(self, real_store, storage):
        assert real_store.add("Big", 10 ** 400, TODAY) is None
        assert storage.get(SUBSCRIPTIONS_KEY) is None

    def test_remove_saves(self, real_store, storage):
        real_store.add("N" * 600, "1", TODAY)
        real_store.add("B", "2", TODAY)

        real_store.remove([0])

        assert names(real_store) == ["B"]
        assert stored(storage) == list(real_store.all())

    def test_failing_log_does_not_skip_save(self, storage):
        logger = MagicMock()
        logger.info.side_effect = RuntimeError("log sink gone")
        logger.debug.side_effect = RuntimeError("log sink gone")
        audit_logger = AuditLogger(logger=logger)
        store = SubscriptionStore(SubscriptionPersistence(storage, audit_logger), audit_logger)
        store.load()

        assert store.add("Netflix", "15.49", TODAY) is not None
        assert stored(storage) == list(store.all())


class TestConcurrency:
    """The store is shared by Streamlit sessions running on different threads."""

    def test_concurrent_adds_are_all_kept_and_saved(self, store, storage):
        def worker(prefix):
            for i in range(25):
                store.add(f"{prefix}-{i}", "1", TODAY)

        threads = [threading.Thread(target=worker, args=(p,)) for p in "WXYZ"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 100
        assert stored(storage) == list(store.all())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
