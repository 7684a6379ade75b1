"""
Envelopes component - Envelope budgeting ledger.
"""

from ._impl import (
    DEFAULT_CONFIG,
    EnvelopeLedger,
    LedgerConfig,
    create_envelope_ledger,
    is_number,
    validate_amount,
    validate_budget,
    validate_distributions,
    validate_title,
)
from .component import (
    run_create,
    run_delete,
    run_distribute,
    run_get,
    run_list,
    run_subtract,
    run_transfer,
    run_update,
)
from .models import (
    CreateEnvelopeInput,
    DeleteEnvelopeInput,
    DistributeInput,
    DistributeOutput,
    DistributeResult,
    DistributionResult,
    DistributionShare,
    EnvelopeListOutput,
    EnvelopeOperationOutput,
    GetEnvelopeInput,
    InsufficientFundsError,
    LedgerError,
    NotFoundError,
    PercentageSumError,
    SubtractInput,
    TransferInput,
    TransferOutput,
    TransferResult,
    UpdateEnvelopeInput,
    ValidationError,
)
from .ports import LedgerStorePort, LockPort

__all__ = [
    # Entry points
    "run_create",
    "run_get",
    "run_list",
    "run_update",
    "run_subtract",
    "run_delete",
    "run_transfer",
    "run_distribute",
    # Input models
    "CreateEnvelopeInput",
    "GetEnvelopeInput",
    "UpdateEnvelopeInput",
    "SubtractInput",
    "DeleteEnvelopeInput",
    "TransferInput",
    "DistributionShare",
    "DistributeInput",
    # Output models
    "EnvelopeOperationOutput",
    "EnvelopeListOutput",
    "TransferOutput",
    "TransferResult",
    "DistributeOutput",
    "DistributeResult",
    "DistributionResult",
    # Errors
    "LedgerError",
    "ValidationError",
    "PercentageSumError",
    "NotFoundError",
    "InsufficientFundsError",
    # Ports
    "LedgerStorePort",
    "LockPort",
    # Service
    "EnvelopeLedger",
    "LedgerConfig",
    "DEFAULT_CONFIG",
    "create_envelope_ledger",
    "is_number",
    "validate_title",
    "validate_budget",
    "validate_amount",
    "validate_distributions",
]
