"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-allowlist-api"
    version: str = "v1"


class RootResponse(BaseModel):
    """Current (root, version) snapshot."""

    ok: bool = True
    root: str = Field(..., description="Current Merkle root (0x-prefixed)")
    version: int = Field(..., description="Current root version")
    authority: str = Field(..., description="Identity allowed to rotate")


class RootRecordInfo(BaseModel):
    """One entry of the root history."""

    version: int
    root: str
    committed_at: str
    leaf_count: Optional[int] = None


class RootHistoryResponse(BaseModel):
    """Response for GET /root/history."""

    ok: bool = True
    records: list[RootRecordInfo] = Field(default_factory=list)


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof folds to the current root")
    root: str = Field(..., description="Root the proof was checked against")
    version: int = Field(..., description="Root version at verification time")
    leaf: str = Field(..., description="Derived leaf digest")
    event_id: str = Field(..., description="ID of the emitted proof_verified event")


class ClaimResponse(BaseModel):
    """Response for POST /claim endpoint."""

    ok: bool = True
    beneficiary: str
    amount: str
    token: Optional[str] = None
    version: int
    transfer_ref: str
    event_id: str


class ClaimStatusResponse(BaseModel):
    """Response for GET /claims/{beneficiary}."""

    ok: bool = True
    beneficiary: str
    version: int
    claimed: bool
    record: Optional[dict[str, Any]] = None


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = False


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
