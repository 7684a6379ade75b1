"""
Tests for the in-memory ledger store adapter.
"""

from src.adapters.memory_ledger import InMemoryLedgerStore
from src.domain.entities import Envelope


def _envelope(store: InMemoryLedgerStore, title: str, budget: float) -> Envelope:
    return store.save(Envelope(id=store.allocate_id(), title=title, budget=budget))


class TestIds:
    def test_ids_start_at_one(self) -> None:
        store = InMemoryLedgerStore()

        assert store.allocate_id() == 1
        assert store.allocate_id() == 2

    def test_ids_not_reused_after_delete(self) -> None:
        store = InMemoryLedgerStore()
        first = _envelope(store, "A", 1)
        store.delete(first.id)

        assert _envelope(store, "B", 1).id == 2


class TestStorage:
    def test_list_keeps_insertion_order(self) -> None:
        store = InMemoryLedgerStore()
        _envelope(store, "A", 1)
        _envelope(store, "B", 2)
        _envelope(store, "C", 3)

        # Replacing an entry keeps its position
        store.save(Envelope(id=1, title="A2", budget=5))

        assert [e.title for e in store.list_all()] == ["A2", "B", "C"]

    def test_get_returns_copy(self) -> None:
        store = InMemoryLedgerStore()
        _envelope(store, "A", 10)

        fetched = store.get(1)
        assert fetched is not None
        fetched.budget = 999

        stored = store.get(1)
        assert stored is not None
        assert stored.budget == 10

    def test_get_missing(self) -> None:
        assert InMemoryLedgerStore().get(42) is None

    def test_delete_missing_is_noop(self) -> None:
        store = InMemoryLedgerStore()
        store.delete(3)

        assert store.count() == 0


class TestTotal:
    def test_adjust_total(self) -> None:
        store = InMemoryLedgerStore()

        assert store.adjust_total(100) == 100
        assert store.adjust_total(-40) == 60
        assert store.get_total() == 60

    def test_reset(self) -> None:
        store = InMemoryLedgerStore()
        _envelope(store, "A", 10)
        store.adjust_total(10)

        store.reset()

        assert store.count() == 0
        assert store.get_total() == 0
        assert store.allocate_id() == 1

    def test_lock_is_reentrant(self) -> None:
        store = InMemoryLedgerStore()

        with store.lock:
            with store.lock:
                assert store.allocate_id() == 1
