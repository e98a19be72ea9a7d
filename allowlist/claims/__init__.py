"""
Claims Module

Exactly-once claim ledger, value-transfer collaborators and the
coordinator that ties verification, claim bookkeeping and transfer together.
"""

from .ledger import ClaimKey, ClaimLedger, ClaimRecord
from .transfer import (
    NATIVE_TOKEN,
    InMemoryTransfer,
    InsufficientFundsError,
    TransferDeniedError,
    TransferError,
    ValueTransfer,
)
from .coordinator import (
    DEFAULT_CUSTODIAL_POOL,
    DEFAULT_MAX_PROOF_DEPTH,
    ClaimCoordinator,
    ClaimReceipt,
    VerificationResult,
)

__all__ = [
    "ClaimKey",
    "ClaimLedger",
    "ClaimRecord",
    "NATIVE_TOKEN",
    "InMemoryTransfer",
    "InsufficientFundsError",
    "TransferDeniedError",
    "TransferError",
    "ValueTransfer",
    "DEFAULT_CUSTODIAL_POOL",
    "DEFAULT_MAX_PROOF_DEPTH",
    "ClaimCoordinator",
    "ClaimReceipt",
    "VerificationResult",
]
