"""
Event Models

Schemas for the observability events emitted by the registry and the
claim coordinator.

Key Design Principles:
1. Events describe committed outcomes only; a rejected claim emits nothing
2. Digests travel as 0x-prefixed hex, amounts as their canonical string
3. emitted_at is metadata and is excluded from event_id
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


EventKind = Literal["root_initialized", "root_rotated", "proof_verified", "redeemed"]


class Event(BaseModel):
    """
    Base event.

    Every event records the root version it was emitted under.
    """

    model_config = ConfigDict(extra="forbid")

    event_id: str = Field(
        default="",
        description="Deterministic identifier derived from the event payload",
    )
    kind: EventKind = Field(
        ...,
        description="Type of event",
    )
    version: int = Field(
        ...,
        ge=0,
        description="Root version the event belongs to",
    )
    emitted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event was emitted (not part of event_id)",
    )


class RootInitialized(Event):
    """Emitted once when a registry is initialized."""

    kind: Literal["root_initialized"] = "root_initialized"
    root: str = Field(..., description="Initial Merkle root (0x-prefixed)")
    authority: str = Field(..., description="Identity allowed to rotate")


class RootRotated(Event):
    """Emitted after each successful rotation."""

    kind: Literal["root_rotated"] = "root_rotated"
    root: str = Field(..., description="New Merkle root (0x-prefixed)")
    previous_root: str = Field(..., description="Root that was superseded")
    leaf_count: Optional[int] = Field(
        default=None,
        description="Number of entitlements in the new tree, if known",
    )


class ProofVerified(Event):
    """Emitted by the read-only verification entry point."""

    kind: Literal["proof_verified"] = "proof_verified"
    beneficiary: str
    amount: str
    token: Optional[str] = None
    valid: bool


class Redeemed(Event):
    """Emitted after a claim is recorded and its transfer has gone through."""

    kind: Literal["redeemed"] = "redeemed"
    beneficiary: str
    amount: str
    token: Optional[str] = None
    transfer_ref: Optional[str] = Field(
        default=None,
        description="Reference returned by the value-transfer collaborator",
    )
