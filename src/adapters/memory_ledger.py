"""In-memory ledger store adapter.

This adapter implements LedgerStorePort for the envelopes component.
State lives for the lifetime of the process only.
"""

import threading

from src.components.envelopes.ports import LockPort
from src.domain.entities import Envelope


class InMemoryLedgerStore:
    """In-memory envelope storage - suitable for single-process deployments."""

    def __init__(self) -> None:
        self._envelopes: dict[int, Envelope] = {}
        self._next_id = 1
        self._total_budget = 0.0
        self._lock = threading.RLock()

    @property
    def lock(self) -> LockPort:
        return self._lock

    def allocate_id(self) -> int:
        """Return the next id. Ids are never handed out twice."""
        with self._lock:
            envelope_id = self._next_id
            self._next_id += 1
            return envelope_id

    def get(self, envelope_id: int) -> Envelope | None:
        envelope = self._envelopes.get(envelope_id)
        return envelope.model_copy() if envelope else None

    def list_all(self) -> list[Envelope]:
        return [envelope.model_copy() for envelope in self._envelopes.values()]

    def save(self, envelope: Envelope) -> Envelope:
        """Insert or replace. Replacing a key keeps its dict position."""
        self._envelopes[envelope.id] = envelope.model_copy()
        return envelope.model_copy()

    def delete(self, envelope_id: int) -> None:
        self._envelopes.pop(envelope_id, None)

    def get_total(self) -> float:
        return self._total_budget

    def adjust_total(self, delta: float) -> float:
        self._total_budget += delta
        return self._total_budget

    def count(self) -> int:
        return len(self._envelopes)

    def reset(self) -> None:
        """Clear all envelopes and counters - useful for testing."""
        with self._lock:
            self._envelopes.clear()
            self._next_id = 1
            self._total_budget = 0.0
