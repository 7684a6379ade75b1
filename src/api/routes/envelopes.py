"""
Envelope API Routes.

Maps each REST call onto one ledger operation.

Status codes:
- 400: malformed input (bad id, missing/invalid fields, self-transfer)
- 404: unknown envelope
- 409: business rule refused (insufficient funds, percentages not 100)
"""

from __future__ import annotations

import logging
import re
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.deps import get_ledger
from src.api.schemas import (
    AmountRequest,
    DistributeRequest,
    DistributeResponse,
    DistributionResultResponse,
    EnvelopeCreateRequest,
    EnvelopeDeleteResponse,
    EnvelopeListResponse,
    EnvelopeResponse,
    EnvelopeUpdateRequest,
    ErrorResponse,
    TransferResponse,
)
from src.components.envelopes import (
    CreateEnvelopeInput,
    DeleteEnvelopeInput,
    DistributeInput,
    DistributionShare,
    EnvelopeLedger,
    EnvelopeOperationOutput,
    GetEnvelopeInput,
    InsufficientFundsError,
    LedgerError,
    NotFoundError,
    PercentageSumError,
    SubtractInput,
    TransferInput,
    UpdateEnvelopeInput,
    run_create,
    run_delete,
    run_distribute,
    run_get,
    run_list,
    run_subtract,
    run_transfer,
    run_update,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}

# Plain decimal integers only: no "+", spaces, underscores or non-ASCII digits
ID_PATTERN = re.compile(r"-?[0-9]+")


# --- Helper Functions ---


def _parse_id(raw: str) -> int:
    """Parse a path id, or 400 if it is not a plain integer."""
    if not ID_PATTERN.fullmatch(raw):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ID format")
    return int(raw)


def _status_for(error: LedgerError) -> int:
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (InsufficientFundsError, PercentageSumError)):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def _raise_for_error(error: LedgerError | None) -> NoReturn:
    if error is None:
        raise HTTPException(status_code=500, detail="Ledger operation failed")
    logger.debug("Ledger rejected request: %s (%s)", error.message, error.code)
    raise HTTPException(status_code=_status_for(error), detail=error.message)


def _envelope_or_raise(result: EnvelopeOperationOutput) -> EnvelopeResponse:
    if not result.success or result.envelope is None:
        _raise_for_error(result.error)
    return EnvelopeResponse.from_envelope(result.envelope)


# --- Routes ---


@router.get("/envelopes", response_model=EnvelopeListResponse)
def list_envelopes(
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> EnvelopeListResponse:
    """List all envelopes and the total budget."""
    result = run_list(ledger)
    return EnvelopeListResponse(
        total_budget=result.total_budget,
        envelopes=[EnvelopeResponse.from_envelope(e) for e in result.envelopes],
    )


@router.post(
    "/envelopes",
    response_model=EnvelopeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_envelope(
    data: EnvelopeCreateRequest,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> EnvelopeResponse:
    """Create a new budget envelope."""
    result = run_create(CreateEnvelopeInput(title=data.title, budget=data.budget), ledger)
    return _envelope_or_raise(result)


@router.post(
    "/envelopes/transfer/{from_id}/{to_id}",
    response_model=TransferResponse,
    responses=ERROR_RESPONSES,
)
def transfer_funds(
    from_id: str,
    to_id: str,
    data: AmountRequest,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> TransferResponse:
    """Transfer money between two envelopes."""
    input_data = TransferInput(
        from_id=_parse_id(from_id),
        to_id=_parse_id(to_id),
        amount=data.amount,
    )
    result = run_transfer(input_data, ledger)

    if not result.success or result.transfer is None:
        _raise_for_error(result.error)

    return TransferResponse(
        message="Transfer successful",
        source=EnvelopeResponse.from_envelope(result.transfer.source),
        destination=EnvelopeResponse.from_envelope(result.transfer.destination),
    )


@router.post(
    "/envelopes/distribute",
    response_model=DistributeResponse,
    responses=ERROR_RESPONSES,
)
def distribute_funds(
    data: DistributeRequest,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> DistributeResponse:
    """Distribute a single amount across multiple envelopes by percentage."""
    distributions = (
        [
            DistributionShare(envelope_id=entry.id, percentage=entry.percentage)
            for entry in data.distributions
        ]
        if data.distributions is not None
        else None
    )
    result = run_distribute(
        DistributeInput(amount=data.amount, distributions=distributions), ledger
    )

    if not result.success or result.distribution is None:
        _raise_for_error(result.error)

    distribution = result.distribution
    return DistributeResponse(
        message="Amount distributed successfully",
        total_distributed=distribution.total_distributed,
        distributions=[
            DistributionResultResponse(
                id=r.envelope_id,
                title=r.title,
                added_amount=r.added_amount,
                new_budget=r.new_budget,
            )
            for r in distribution.results
        ],
    )


@router.get(
    "/envelopes/{envelope_id}",
    response_model=EnvelopeResponse,
    responses=ERROR_RESPONSES,
)
def get_envelope(
    envelope_id: str,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> EnvelopeResponse:
    """Get an envelope by ID."""
    result = run_get(GetEnvelopeInput(envelope_id=_parse_id(envelope_id)), ledger)
    return _envelope_or_raise(result)


@router.put(
    "/envelopes/{envelope_id}",
    response_model=EnvelopeResponse,
    responses=ERROR_RESPONSES,
)
def update_envelope(
    envelope_id: str,
    data: EnvelopeUpdateRequest,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> EnvelopeResponse:
    """Update envelope title and/or budget."""
    input_data = UpdateEnvelopeInput(
        envelope_id=_parse_id(envelope_id),
        title=data.title,
        budget=data.budget,
    )
    return _envelope_or_raise(run_update(input_data, ledger))


@router.post(
    "/envelopes/{envelope_id}/subtract",
    response_model=EnvelopeResponse,
    responses=ERROR_RESPONSES,
)
def subtract_from_envelope(
    envelope_id: str,
    data: AmountRequest,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> EnvelopeResponse:
    """Subtract money from an envelope (e.g. when spending)."""
    input_data = SubtractInput(envelope_id=_parse_id(envelope_id), amount=data.amount)
    return _envelope_or_raise(run_subtract(input_data, ledger))


@router.delete(
    "/envelopes/{envelope_id}",
    response_model=EnvelopeDeleteResponse,
    responses=ERROR_RESPONSES,
)
def delete_envelope(
    envelope_id: str,
    ledger: EnvelopeLedger = Depends(get_ledger),
) -> EnvelopeDeleteResponse:
    """Delete a specific envelope."""
    result = run_delete(DeleteEnvelopeInput(envelope_id=_parse_id(envelope_id)), ledger)
    return EnvelopeDeleteResponse(
        message="Envelope deleted successfully",
        envelope=_envelope_or_raise(result),
    )
