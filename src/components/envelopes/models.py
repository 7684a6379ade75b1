"""
Envelopes component - Data models.

Input/output records for the shell layer plus the ledger error types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.domain.entities import Envelope

# --- Error Types ---


class LedgerError(Exception):
    """Base ledger error."""

    code = "ledger_error"

    def __init__(self, message: str, code: str | None = None, field: str | None = None) -> None:
        self.message = message
        if code is not None:
            self.code = code
        self.field = field
        super().__init__(message)


class ValidationError(LedgerError):
    """Malformed or missing input."""

    code = "validation_error"


class PercentageSumError(ValidationError):
    """Distribution percentages do not add up to 100."""

    code = "percentages_sum"

    def __init__(self, total_percentage: float) -> None:
        self.total_percentage = total_percentage
        super().__init__("Percentages must sum to 100", field="distributions")


class NotFoundError(LedgerError):
    """Referenced envelope does not exist."""

    code = "envelope_not_found"

    def __init__(self, envelope_id: Any, message: str | None = None) -> None:
        self.envelope_id = envelope_id
        super().__init__(message or f"Envelope with ID {envelope_id} not found")


class InsufficientFundsError(LedgerError):
    """Requested decrease exceeds the envelope balance."""

    code = "insufficient_funds"

    def __init__(self, available: float, requested: float, message: str | None = None) -> None:
        self.available = available
        self.requested = requested
        super().__init__(message or "Insufficient funds in envelope", field="amount")


# --- Input Models ---


@dataclass(frozen=True)
class CreateEnvelopeInput:
    """Input for creating an envelope."""

    title: Any
    budget: Any


@dataclass(frozen=True)
class GetEnvelopeInput:
    """Input for getting an envelope."""

    envelope_id: int


@dataclass(frozen=True)
class UpdateEnvelopeInput:
    """Input for updating an envelope. None means "not supplied"."""

    envelope_id: int
    title: Any = None
    budget: Any = None


@dataclass(frozen=True)
class SubtractInput:
    """Input for spending from an envelope."""

    envelope_id: int
    amount: Any


@dataclass(frozen=True)
class DeleteEnvelopeInput:
    """Input for deleting an envelope."""

    envelope_id: int


@dataclass(frozen=True)
class TransferInput:
    """Input for moving funds between two envelopes."""

    from_id: int
    to_id: int
    amount: Any


@dataclass(frozen=True)
class DistributionShare:
    """One entry of a distribution: an envelope and its percentage."""

    envelope_id: Any
    percentage: Any


@dataclass(frozen=True)
class DistributeInput:
    """Input for splitting a lump sum across envelopes."""

    amount: Any
    distributions: Any


# --- Output Models ---


@dataclass(frozen=True)
class DistributionResult:
    """Per-envelope outcome of a distribution."""

    envelope_id: int
    title: str
    added_amount: float
    new_budget: float


@dataclass(frozen=True)
class TransferResult:
    """Both envelopes after a transfer."""

    source: Envelope
    destination: Envelope


@dataclass(frozen=True)
class DistributeResult:
    """Outcome of a distribution."""

    total_distributed: float
    results: tuple[DistributionResult, ...]


@dataclass(frozen=True)
class EnvelopeOperationOutput:
    """Output from a single-envelope operation."""

    envelope: Envelope | None
    error: LedgerError | None
    success: bool


@dataclass(frozen=True)
class EnvelopeListOutput:
    """Output from list operation."""

    envelopes: tuple[Envelope, ...]
    total_budget: float
    count: int


@dataclass(frozen=True)
class TransferOutput:
    """Output from transfer operation."""

    transfer: TransferResult | None
    error: LedgerError | None
    success: bool


@dataclass(frozen=True)
class DistributeOutput:
    """Output from distribute operation."""

    distribution: DistributeResult | None
    error: LedgerError | None
    success: bool
