"""
Schemas
File: leaf.py

Purpose: Leaf-scheme configuration and entitlement records.

A deployment selects exactly one (scheme, hash primitive) pair and keeps it
for the life of a tree. The off-chain tree builder must use the same pair,
otherwise every proof is rejected.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class LeafScheme(str, Enum):
    """Canonical serialization used to derive an entitlement leaf."""

    # "<beneficiary>:<amount>" with amount as an unsigned integer
    BINARY = "binary"
    # "<beneficiaryId>:<tokenId>:<amount>" with amount fixed to 8 decimals
    MULTI_ASSET = "multi_asset"


class HashPrimitive(str, Enum):
    """256-bit hash primitive used for both leaves and interior nodes."""

    SHA256 = "sha256"
    KECCAK256 = "keccak256"


Amount = Union[int, Decimal, str]


class LeafConfig(BaseModel):
    """
    Tagged leaf configuration for one deployment.

    All components (coordinator, CLI tree builder, API) must be built from
    the same LeafConfig.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    scheme: LeafScheme = Field(
        default=LeafScheme.BINARY,
        description="Entitlement serialization scheme",
    )
    hash_primitive: HashPrimitive = Field(
        default=HashPrimitive.SHA256,
        description="Hash primitive for leaves and nodes",
    )

    @property
    def requires_token(self) -> bool:
        return self.scheme == LeafScheme.MULTI_ASSET


class Entitlement(BaseModel):
    """One (beneficiary, amount[, token]) record of the off-chain set."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    beneficiary: str = Field(..., min_length=1, description="Beneficiary identity")
    amount: Amount = Field(..., description="Entitled amount")
    token: Optional[str] = Field(
        default=None,
        description="Token identifier (multi-asset scheme only)",
    )


__all__ = [
    "LeafScheme",
    "HashPrimitive",
    "Amount",
    "LeafConfig",
    "Entitlement",
]
