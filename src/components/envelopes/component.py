"""
Envelopes component - Envelope budgeting ledger.

Handles envelope CRUD, spending, transfers and percentage distribution.

Shell Layer - converts ledger exceptions into output records.
"""

from __future__ import annotations

from ._impl import EnvelopeLedger
from .models import (
    CreateEnvelopeInput,
    DeleteEnvelopeInput,
    DistributeInput,
    DistributeOutput,
    EnvelopeListOutput,
    EnvelopeOperationOutput,
    GetEnvelopeInput,
    LedgerError,
    SubtractInput,
    TransferInput,
    TransferOutput,
    UpdateEnvelopeInput,
)

# --- Shell Layer Functions ---


def run_create(
    input_data: CreateEnvelopeInput,
    ledger: EnvelopeLedger,
) -> EnvelopeOperationOutput:
    """Create a new envelope."""
    try:
        envelope = ledger.create(title=input_data.title, budget=input_data.budget)
    except LedgerError as e:
        return EnvelopeOperationOutput(envelope=None, error=e, success=False)

    return EnvelopeOperationOutput(envelope=envelope, error=None, success=True)


def run_get(
    input_data: GetEnvelopeInput,
    ledger: EnvelopeLedger,
) -> EnvelopeOperationOutput:
    """Get an envelope by ID."""
    try:
        envelope = ledger.get(input_data.envelope_id)
    except LedgerError as e:
        return EnvelopeOperationOutput(envelope=None, error=e, success=False)

    return EnvelopeOperationOutput(envelope=envelope, error=None, success=True)


def run_list(ledger: EnvelopeLedger) -> EnvelopeListOutput:
    """List all envelopes with the running total."""
    snapshot = ledger.list_all()
    return EnvelopeListOutput(
        envelopes=tuple(snapshot.envelopes),
        total_budget=snapshot.total_budget,
        count=len(snapshot.envelopes),
    )


def run_update(
    input_data: UpdateEnvelopeInput,
    ledger: EnvelopeLedger,
) -> EnvelopeOperationOutput:
    """Update an envelope's title and/or budget."""
    try:
        envelope = ledger.update(
            input_data.envelope_id,
            title=input_data.title,
            budget=input_data.budget,
        )
    except LedgerError as e:
        return EnvelopeOperationOutput(envelope=None, error=e, success=False)

    return EnvelopeOperationOutput(envelope=envelope, error=None, success=True)


def run_subtract(
    input_data: SubtractInput,
    ledger: EnvelopeLedger,
) -> EnvelopeOperationOutput:
    """Spend from an envelope."""
    try:
        envelope = ledger.subtract(input_data.envelope_id, input_data.amount)
    except LedgerError as e:
        return EnvelopeOperationOutput(envelope=None, error=e, success=False)

    return EnvelopeOperationOutput(envelope=envelope, error=None, success=True)


def run_delete(
    input_data: DeleteEnvelopeInput,
    ledger: EnvelopeLedger,
) -> EnvelopeOperationOutput:
    """Delete an envelope. The removed record is returned."""
    try:
        envelope = ledger.delete(input_data.envelope_id)
    except LedgerError as e:
        return EnvelopeOperationOutput(envelope=None, error=e, success=False)

    return EnvelopeOperationOutput(envelope=envelope, error=None, success=True)


def run_transfer(
    input_data: TransferInput,
    ledger: EnvelopeLedger,
) -> TransferOutput:
    """Move funds between two envelopes."""
    try:
        result = ledger.transfer(input_data.from_id, input_data.to_id, input_data.amount)
    except LedgerError as e:
        return TransferOutput(transfer=None, error=e, success=False)

    return TransferOutput(transfer=result, error=None, success=True)


def run_distribute(
    input_data: DistributeInput,
    ledger: EnvelopeLedger,
) -> DistributeOutput:
    """Split a lump sum across envelopes by percentage."""
    try:
        result = ledger.distribute(input_data.amount, input_data.distributions)
    except LedgerError as e:
        return DistributeOutput(distribution=None, error=e, success=False)

    return DistributeOutput(distribution=result, error=None, success=True)
