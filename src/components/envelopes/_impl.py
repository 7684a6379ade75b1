"""
EnvelopeLedger - Envelope budgeting rules over an in-memory store.

Functional Core - validation and invariant-preserving mutations.

Key behaviors:
- Envelope ids come from a monotonic counter and are never reused
- The running total always equals the sum of envelope budgets
- Transfers move value between envelopes and never change the total
- Every error is raised before the store is touched
- Distribution verifies all envelope ids up front unless configured otherwise
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from src.domain.entities import Envelope, LedgerSnapshot

from .models import (
    DistributeResult,
    DistributionResult,
    DistributionShare,
    InsufficientFundsError,
    NotFoundError,
    PercentageSumError,
    TransferResult,
    ValidationError,
)
from .ports import LedgerStorePort

logger = logging.getLogger(__name__)


# --- Configuration ---


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger configuration from rules."""

    percentage_tolerance: float = 0.01
    atomic_distribute: bool = True
    max_title_length: int = 200


DEFAULT_CONFIG = LedgerConfig()


# --- Validation Functions ---


def is_number(value: Any) -> bool:
    """True for ints and floats that fit a finite float. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def validate_title(title: Any, max_length: int = DEFAULT_CONFIG.max_title_length) -> str:
    """Return the title if it is a usable label, else raise."""
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required", code="title_required", field="title")
    if len(title) > max_length:
        raise ValidationError(
            f"Title must be {max_length} characters or less",
            code="title_too_long",
            field="title",
        )
    return title


def validate_budget(budget: Any) -> float:
    """Budgets are numbers >= 0."""
    if budget is None:
        raise ValidationError("Budget is required", code="budget_required", field="budget")
    if not is_number(budget) or budget < 0:
        raise ValidationError(
            "Budget must be a non-negative number", code="budget_invalid", field="budget"
        )
    return float(budget)


def validate_amount(amount: Any) -> float:
    """Amounts moved or spent are numbers > 0."""
    if amount is None:
        raise ValidationError("Amount is required", code="amount_required", field="amount")
    if not is_number(amount) or amount <= 0:
        raise ValidationError(
            "Amount must be a positive number", code="amount_invalid", field="amount"
        )
    return float(amount)


def validate_distributions(
    distributions: Any,
    tolerance: float = DEFAULT_CONFIG.percentage_tolerance,
) -> list[DistributionShare]:
    """Check the shape of a distribution list and that it sums to 100%."""
    if not isinstance(distributions, (list, tuple)) or not distributions:
        raise ValidationError(
            "Distributions array is required",
            code="distributions_required",
            field="distributions",
        )

    shares: list[DistributionShare] = []
    for index, entry in enumerate(distributions):
        if not isinstance(entry, DistributionShare):
            raise ValidationError(
                f"Distribution entry {index} is malformed",
                code="distribution_invalid",
                field="distributions",
            )
        envelope_id = entry.envelope_id
        if isinstance(envelope_id, bool) or not isinstance(envelope_id, int):
            raise ValidationError(
                f"Distribution entry {index} has an invalid envelope ID",
                code="distribution_invalid",
                field="distributions",
            )
        if not is_number(entry.percentage) or entry.percentage < 0:
            raise ValidationError(
                f"Distribution entry {index} has an invalid percentage",
                code="percentage_invalid",
                field="distributions",
            )
        shares.append(entry)

    total_percentage = sum(share.percentage for share in shares)
    if abs(total_percentage - 100) > tolerance:
        raise PercentageSumError(total_percentage)

    return shares


# --- Envelope Ledger ---


class EnvelopeLedger:
    """
    Envelope ledger service.

    Every public method runs under the store lock, so one operation is
    one atomic step as seen by any other caller.
    """

    def __init__(self, store: LedgerStorePort, config: LedgerConfig | None = None) -> None:
        """Initialize ledger."""
        self._store = store
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> LedgerConfig:
        return self._config

    def _require(self, envelope_id: int, message: str | None = None) -> Envelope:
        envelope = self._store.get(envelope_id)
        if envelope is None:
            raise NotFoundError(envelope_id, message or "Envelope not found")
        return envelope

    # --- Reads ---

    def get(self, envelope_id: int) -> Envelope:
        """Get envelope by ID."""
        with self._store.lock:
            return self._require(envelope_id)

    def list_all(self) -> LedgerSnapshot:
        """Current total and all envelopes in creation order."""
        with self._store.lock:
            return LedgerSnapshot(
                total_budget=self._store.get_total(),
                envelopes=self._store.list_all(),
            )

    # --- Mutations ---

    def create(self, title: Any, budget: Any) -> Envelope:
        """Create a new envelope."""
        if title is None or budget is None:
            raise ValidationError("Title and budget are required", code="fields_required")
        title = validate_title(title, self._config.max_title_length)
        amount = validate_budget(budget)

        with self._store.lock:
            envelope = Envelope(id=self._store.allocate_id(), title=title, budget=amount)
            saved = self._store.save(envelope)
            self._store.adjust_total(amount)

        logger.info("Created envelope id=%s title=%r budget=%s", saved.id, saved.title, amount)
        return saved

    def update(self, envelope_id: int, title: Any = None, budget: Any = None) -> Envelope:
        """
        Replace an envelope's title and/or budget.

        Both fields are validated before either is written.
        """
        with self._store.lock:
            envelope = self._require(envelope_id)

            if title is None and budget is None:
                raise ValidationError("Title or budget must be provided", code="update_empty")

            new_title = (
                validate_title(title, self._config.max_title_length)
                if title is not None
                else envelope.title
            )
            new_budget = validate_budget(budget) if budget is not None else envelope.budget
            delta = new_budget - envelope.budget

            updated = envelope.model_copy(update={"title": new_title, "budget": new_budget})
            saved = self._store.save(updated)
            if delta:
                self._store.adjust_total(delta)

        logger.info("Updated envelope id=%s budget_delta=%s", envelope_id, delta)
        return saved

    def subtract(self, envelope_id: int, amount: Any) -> Envelope:
        """Spend ``amount`` from an envelope."""
        with self._store.lock:
            envelope = self._require(envelope_id)
            value = validate_amount(amount)
            if envelope.budget < value:
                raise InsufficientFundsError(envelope.budget, value)

            saved = self._store.save(
                envelope.model_copy(update={"budget": envelope.budget - value})
            )
            self._store.adjust_total(-value)

        logger.info("Subtracted %s from envelope id=%s", value, envelope_id)
        return saved

    def delete(self, envelope_id: int) -> Envelope:
        """Remove an envelope and return the removed record."""
        with self._store.lock:
            envelope = self._require(envelope_id)
            self._store.delete(envelope_id)
            self._store.adjust_total(-envelope.budget)

        logger.info("Deleted envelope id=%s budget=%s", envelope_id, envelope.budget)
        return envelope

    def transfer(self, from_id: int, to_id: int, amount: Any) -> TransferResult:
        """Move ``amount`` between two envelopes. The total is unchanged."""
        if from_id == to_id:
            raise ValidationError(
                "Cannot transfer to the same envelope", code="same_envelope", field="to_id"
            )

        with self._store.lock:
            source = self._require(from_id, "Source envelope not found")
            destination = self._require(to_id, "Destination envelope not found")
            value = validate_amount(amount)
            if source.budget < value:
                raise InsufficientFundsError(
                    source.budget, value, "Insufficient funds in source envelope"
                )

            saved_source = self._store.save(
                source.model_copy(update={"budget": source.budget - value})
            )
            saved_destination = self._store.save(
                destination.model_copy(update={"budget": destination.budget + value})
            )

        logger.info("Transferred %s from envelope id=%s to id=%s", value, from_id, to_id)
        return TransferResult(source=saved_source, destination=saved_destination)

    def distribute(
        self,
        amount: Any,
        distributions: Sequence[DistributionShare],
    ) -> DistributeResult:
        """
        Split ``amount`` across envelopes by percentage.

        With ``atomic_distribute`` (default) every id is checked before any
        envelope changes. Without it, entries before an unknown id stay
        applied and the total is not incremented.
        """
        value = validate_amount(amount)
        shares = validate_distributions(distributions, self._config.percentage_tolerance)

        with self._store.lock:
            if self._config.atomic_distribute:
                for share in shares:
                    if self._store.get(share.envelope_id) is None:
                        raise NotFoundError(share.envelope_id)

            results: list[DistributionResult] = []
            for share in shares:
                envelope = self._store.get(share.envelope_id)
                if envelope is None:
                    logger.warning(
                        "Distribution stopped at unknown envelope id=%s after %d entries",
                        share.envelope_id,
                        len(results),
                    )
                    raise NotFoundError(share.envelope_id)

                added = value * share.percentage / 100
                saved = self._store.save(
                    envelope.model_copy(update={"budget": envelope.budget + added})
                )
                results.append(
                    DistributionResult(
                        envelope_id=saved.id,
                        title=saved.title,
                        added_amount=added,
                        new_budget=saved.budget,
                    )
                )

            self._store.adjust_total(value)

        logger.info("Distributed %s across %d envelopes", value, len(results))
        return DistributeResult(total_distributed=value, results=tuple(results))


def create_envelope_ledger(
    store: LedgerStorePort,
    config: LedgerConfig | None = None,
) -> EnvelopeLedger:
    """Factory function for EnvelopeLedger."""
    return EnvelopeLedger(store=store, config=config)
