"""
Claim Coordinator

Orchestrates the redemption protocol as one all-or-nothing unit:

    1. snapshot (root, version) from the registry
    2. bound the proof length
    3. derive the leaf with the deployment's leaf scheme
    4. fold the proof; reject with InvalidProof on mismatch
    5. reject with AlreadyClaimed if (version, beneficiary) has redeemed
    6. mark the pair claimed
    7. transfer the amount from the custodial pool; on failure undo 6
    8. emit Redeemed

Steps 1-4 alone back the read-only verify() entry point.

The coordinator takes no locks. The host must run each claim() as an
isolated unit with respect to the same registry and ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence, Union

from allowlist.claims.ledger import ClaimLedger, ClaimRecord
from allowlist.claims.transfer import TransferError, ValueTransfer
from allowlist.crypto.hashing import HashEngine, format_amount, parse_digest, to_hex
from allowlist.events import EventRecorder, ProofVerified, Redeemed
from allowlist.merkle.merkle_proofs import MerkleVerifier
from allowlist.registry.root_registry import RootRegistry, RootSnapshot
from allowlist.schemas.errors import (
    AlreadyClaimedException,
    InvalidProofException,
    ProofTooLongException,
    TransferFailedException,
)
from allowlist.schemas.leaf import Amount, LeafConfig

if TYPE_CHECKING:
    from allowlist.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)

DEFAULT_MAX_PROOF_DEPTH = 32
DEFAULT_CUSTODIAL_POOL = "custodial-pool"

ProofInput = Sequence[Union[bytes, str]]


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of the read-only verification entry point."""
    valid: bool
    root: bytes
    version: int
    leaf: bytes
    event: ProofVerified


@dataclass(frozen=True)
class ClaimReceipt:
    """Outcome of a successful redemption."""
    beneficiary: str
    amount: str
    token: Optional[str]
    version: int
    transfer_ref: str
    event: Redeemed


def _parse_proof(proof: ProofInput) -> list[bytes]:
    siblings: list[bytes] = []
    for i, element in enumerate(proof):
        try:
            siblings.append(parse_digest(element))
        except ValueError as e:
            raise InvalidProofException(
                f"Proof element {i} is not a 32-byte digest: {e}",
                details={"index": i},
            ) from e
    return siblings


class ClaimCoordinator:
    """
    End-to-end verification and redemption.

    Usage:
        coordinator = ClaimCoordinator(
            registry=RootRegistry.create(root, authority="admin"),
            ledger=ClaimLedger(),
            transfer=InMemoryTransfer(),
            leaf_config=LeafConfig(scheme=LeafScheme.BINARY),
        )
        receipt = coordinator.claim("alice", 100, proof)
    """

    def __init__(
        self,
        registry: RootRegistry,
        ledger: ClaimLedger,
        transfer: ValueTransfer,
        *,
        leaf_config: Optional[LeafConfig] = None,
        max_proof_depth: int = DEFAULT_MAX_PROOF_DEPTH,
        custodial_pool: str = DEFAULT_CUSTODIAL_POOL,
        events: Optional[EventRecorder] = None,
    ) -> None:
        if max_proof_depth < 0:
            raise ValueError(f"max_proof_depth must be non-negative, got {max_proof_depth}")
        self.registry = registry
        self.ledger = ledger
        self.transfer = transfer
        self.leaf_config = leaf_config or LeafConfig()
        self.max_proof_depth = max_proof_depth
        self.custodial_pool = custodial_pool
        self.events = events if events is not None else EventRecorder()
        self.engine = HashEngine(self.leaf_config.hash_primitive)
        self.verifier = MerkleVerifier(self.engine)

    @classmethod
    def from_config(
        cls,
        config: "RuntimeConfig",
        registry: RootRegistry,
        ledger: ClaimLedger,
        transfer: ValueTransfer,
        events: Optional[EventRecorder] = None,
    ) -> "ClaimCoordinator":
        """Build a coordinator from runtime configuration."""
        return cls(
            registry=registry,
            ledger=ledger,
            transfer=transfer,
            leaf_config=config.leaf.to_leaf_config(),
            max_proof_depth=config.claims.max_proof_depth,
            custodial_pool=config.claims.custodial_pool,
            events=events,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_root(self) -> RootSnapshot:
        return self.registry.current()

    def has_claimed(self, beneficiary: str, version: Optional[int] = None) -> bool:
        """Claim status for a version (the current one by default)."""
        if version is None:
            version = self.registry.current().version
        return self.ledger.has_claimed(version, beneficiary)

    def leaf_for(
        self,
        beneficiary: str,
        amount: Amount | float,
        token: Optional[str] = None,
    ) -> bytes:
        return self.engine.leaf(self.leaf_config.scheme, beneficiary, amount, token)

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    def _check_inclusion(
        self,
        beneficiary: str,
        amount: Amount | float,
        proof: ProofInput,
        token: Optional[str],
    ) -> tuple[RootSnapshot, bytes, bool]:
        snapshot = self.registry.current()
        if len(proof) > self.max_proof_depth:
            raise ProofTooLongException(length=len(proof), max_depth=self.max_proof_depth)
        siblings = _parse_proof(proof)
        leaf = self.leaf_for(beneficiary, amount, token)
        valid = self.verifier.verify(siblings, snapshot.root, leaf)
        return snapshot, leaf, valid

    def verify(
        self,
        beneficiary: str,
        amount: Amount | float,
        proof: ProofInput,
        token: Optional[str] = None,
    ) -> VerificationResult:
        """
        Read-only entitlement check. Never mutates state or transfers value.

        Raises:
            NotInitializedException: If the registry has no root
            ProofTooLongException: If the proof exceeds max_proof_depth
            InvalidProofException: If a proof element is malformed
            InvalidEntitlementException: If the entitlement does not fit the scheme
        """
        snapshot, leaf, valid = self._check_inclusion(beneficiary, amount, proof, token)
        event = self.events.emit(
            ProofVerified(
                version=snapshot.version,
                beneficiary=beneficiary,
                amount=format_amount(self.leaf_config.scheme, amount),
                token=token,
                valid=valid,
            )
        )
        return VerificationResult(
            valid=valid,
            root=snapshot.root,
            version=snapshot.version,
            leaf=leaf,
            event=event,
        )

    def claim(
        self,
        beneficiary: str,
        amount: Amount | float,
        proof: ProofInput,
        token: Optional[str] = None,
    ) -> ClaimReceipt:
        """
        Redeem an entitlement exactly once for the current root version.

        Raises:
            NotInitializedException: If the registry has no root
            ProofTooLongException: If the proof exceeds max_proof_depth
            InvalidEntitlementException: If the entitlement does not fit the scheme
            InvalidProofException: If the proof does not fold to the current root
            AlreadyClaimedException: If (version, beneficiary) has redeemed
            TransferFailedException: If the transfer failed; the claim is rolled back
        """
        snapshot, _, valid = self._check_inclusion(beneficiary, amount, proof, token)
        version = snapshot.version

        if not valid:
            logger.warning(f"Invalid proof for {beneficiary!r} at v{version}")
            raise InvalidProofException(
                "Proof does not match the current merkle root",
                beneficiary=beneficiary,
                version=version,
                details={"root": to_hex(snapshot.root)},
            )

        if self.ledger.has_claimed(version, beneficiary):
            logger.warning(f"Replay rejected for {beneficiary!r} at v{version}")
            raise AlreadyClaimedException(beneficiary=beneficiary, version=version)

        amount_str = format_amount(self.leaf_config.scheme, amount)
        record: ClaimRecord
        try:
            with self.ledger.reserve(
                version, beneficiary, amount=amount_str, token=token
            ) as record:
                record.transfer_ref = self.transfer.transfer(
                    self.custodial_pool,
                    beneficiary,
                    Decimal(amount_str),
                    token,
                )
        except TransferError as e:
            raise TransferFailedException(
                f"Value transfer failed: {e.message}",
                reason=e.reason,
                details={"beneficiary": beneficiary, "version": version},
            ) from e

        logger.info(f"{beneficiary!r} claimed {amount_str} {token or 'native'} at v{version}")
        event = self.events.emit(
            Redeemed(
                version=version,
                beneficiary=beneficiary,
                amount=amount_str,
                token=token,
                transfer_ref=record.transfer_ref,
            )
        )
        return ClaimReceipt(
            beneficiary=beneficiary,
            amount=amount_str,
            token=token,
            version=version,
            transfer_ref=record.transfer_ref,
            event=event,
        )
