"""
Claim Routes

Read-only proof verification, redemption and claim status.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from allowlist.crypto.hashing import to_hex
from api.deps import AllowlistService, get_caller_identity, get_service
from api.models.requests import ClaimRequest, VerifyRequest
from api.models.responses import ClaimResponse, ClaimStatusResponse, VerifyResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["claims"])


@router.post("/verify", response_model=VerifyResponse)
def verify_proof(
    request: VerifyRequest,
    service: AllowlistService = Depends(get_service),
) -> VerifyResponse:
    """
    Check an entitlement against the current root without claiming it.

    An invalid proof is a normal outcome here (valid=false), not an error.
    """
    with service.transaction():
        result = service.coordinator.verify(
            request.beneficiary,
            request.amount,
            request.proof,
            token=request.token,
        )
    return VerifyResponse(
        valid=result.valid,
        root=to_hex(result.root),
        version=result.version,
        leaf=to_hex(result.leaf),
        event_id=result.event.event_id,
    )


@router.post("/claim", response_model=ClaimResponse)
def claim(
    request: ClaimRequest,
    caller: str = Depends(get_caller_identity),
    service: AllowlistService = Depends(get_service),
) -> ClaimResponse:
    """
    Redeem the caller's entitlement for the current root version.

    The beneficiary is always the authenticated caller.
    """
    with service.transaction():
        receipt = service.coordinator.claim(
            caller,
            request.amount,
            request.proof,
            token=request.token,
        )
    return ClaimResponse(
        beneficiary=receipt.beneficiary,
        amount=receipt.amount,
        token=receipt.token,
        version=receipt.version,
        transfer_ref=receipt.transfer_ref,
        event_id=receipt.event.event_id,
    )


@router.get("/claims/{beneficiary}", response_model=ClaimStatusResponse)
def claim_status(
    beneficiary: str,
    service: AllowlistService = Depends(get_service),
) -> ClaimStatusResponse:
    """Claim status of a beneficiary for the current root version."""
    with service.transaction():
        version = service.registry.current().version
        record = service.ledger.get_record(version, beneficiary)
    return ClaimStatusResponse(
        beneficiary=beneficiary,
        version=version,
        claimed=record is not None,
        record=record.to_dict() if record is not None else None,
    )
