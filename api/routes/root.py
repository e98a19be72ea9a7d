"""
Root Routes

Initialization, rotation and inspection of the versioned Merkle root.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from allowlist.crypto.hashing import to_hex
from api.deps import AllowlistService, get_caller_identity, get_service
from api.models.requests import InitializeRequest, RotateRequest
from api.models.responses import RootHistoryResponse, RootRecordInfo, RootResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/root", tags=["root"])


def _root_response(service: AllowlistService) -> RootResponse:
    state = service.registry.state
    return RootResponse(
        root=to_hex(state.merkle_root),
        version=state.version,
        authority=state.authority,
    )


@router.get("", response_model=RootResponse)
def get_root(service: AllowlistService = Depends(get_service)) -> RootResponse:
    """Current (root, version) snapshot."""
    with service.transaction():
        return _root_response(service)


@router.get("/history", response_model=RootHistoryResponse)
def get_history(service: AllowlistService = Depends(get_service)) -> RootHistoryResponse:
    """Every committed root, oldest first."""
    with service.transaction():
        records = [RootRecordInfo(**r.to_dict()) for r in service.registry.history()]
    return RootHistoryResponse(records=records)


@router.post("/initialize", response_model=RootResponse)
def initialize_root(
    request: InitializeRequest,
    service: AllowlistService = Depends(get_service),
) -> RootResponse:
    """
    Set the initial root (version 0) and the rotation authority.

    Succeeds once per service instance; later calls get ALREADY_INITIALIZED.
    """
    with service.transaction():
        service.registry.initialize(
            request.root,
            request.authority,
            leaf_count=request.leaf_count,
        )
        return _root_response(service)


@router.post("/rotate", response_model=RootResponse)
def rotate_root(
    request: RotateRequest,
    caller: str = Depends(get_caller_identity),
    service: AllowlistService = Depends(get_service),
) -> RootResponse:
    """
    Replace the root and advance the version.

    Only the authority given at initialization may rotate.
    """
    with service.transaction():
        service.registry.rotate(
            caller,
            request.new_root,
            leaf_count=request.leaf_count,
        )
        return _root_response(service)
