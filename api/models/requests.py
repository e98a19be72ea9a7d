"""
API Request Models

Pydantic models for API request validation.
Digests travel as 0x-prefixed hex and are checked to be 32 bytes.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from allowlist.crypto.hashing import parse_digest


AmountField = Union[int, float, str]


def _check_digest(value: str) -> str:
    parse_digest(value)
    return value.lower()


class InitializeRequest(BaseModel):
    """Request body for POST /root/initialize."""

    model_config = ConfigDict(extra="forbid")

    root: str = Field(..., description="Initial Merkle root (0x-prefixed, 32 bytes)")
    authority: str = Field(..., min_length=1, description="Identity allowed to rotate the root")
    leaf_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return _check_digest(v)


class RotateRequest(BaseModel):
    """Request body for POST /root/rotate. The caller comes from X-Caller-Identity."""

    model_config = ConfigDict(extra="forbid")

    new_root: str = Field(..., description="New Merkle root (0x-prefixed, 32 bytes)")
    leaf_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("new_root")
    @classmethod
    def validate_new_root(cls, v: str) -> str:
        return _check_digest(v)


class VerifyRequest(BaseModel):
    """Request body for POST /verify."""

    model_config = ConfigDict(extra="forbid")

    beneficiary: str = Field(..., min_length=1)
    amount: AmountField = Field(..., description="Entitled amount")
    token: Optional[str] = Field(default=None, description="Token id (multi-asset scheme)")
    proof: list[str] = Field(default_factory=list, description="Sibling digests, bottom to top")


class ClaimRequest(BaseModel):
    """Request body for POST /claim. The beneficiary is the authenticated caller."""

    model_config = ConfigDict(extra="forbid")

    amount: AmountField = Field(..., description="Entitled amount")
    token: Optional[str] = Field(default=None, description="Token id (multi-asset scheme)")
    proof: list[str] = Field(default_factory=list, description="Sibling digests, bottom to top")
