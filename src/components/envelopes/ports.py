"""
Envelopes component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import Envelope


class LockPort(Protocol):
    """Context-manager lock guarding the whole ledger."""

    def __enter__(self) -> bool: ...

    def __exit__(self, *args: object) -> None: ...


class LedgerStorePort(Protocol):
    """Storage interface for the envelope ledger.

    Envelopes handed out by the store are copies; only ``save`` writes back.
    """

    @property
    def lock(self) -> LockPort:
        """Lock held for the duration of one ledger operation."""
        ...

    def allocate_id(self) -> int:
        """Return the next envelope id and advance the counter."""
        ...

    def get(self, envelope_id: int) -> Envelope | None:
        """Get envelope by ID."""
        ...

    def list_all(self) -> list[Envelope]:
        """List envelopes in creation order."""
        ...

    def save(self, envelope: Envelope) -> Envelope:
        """Insert or replace an envelope, keeping its position."""
        ...

    def delete(self, envelope_id: int) -> None:
        """Remove an envelope."""
        ...

    def get_total(self) -> float:
        """Current running total."""
        ...

    def adjust_total(self, delta: float) -> float:
        """Add ``delta`` to the running total and return the new value."""
        ...
