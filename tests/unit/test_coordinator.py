"""
Claim Coordinator Unit Tests
Tests for allowlist/claims/coordinator.py

Scenarios:
1. Valid claim transfers value and records the pair
2. Wrong amount / foreign proof is rejected without state change
3. Exactly one redemption per (version, beneficiary)
4. Transfer failure rolls the claim back and is retryable
5. Rotation opens a fresh claim window
6. Proof length limit is checked before any hashing
7. Multi-asset scheme end to end
"""
from decimal import Decimal

import pytest

from allowlist.claims import ClaimCoordinator, ClaimLedger, InMemoryTransfer
from allowlist.config import RuntimeConfig
from allowlist.crypto.hashing import sha256, to_hex
from allowlist.registry import RootRegistry
from allowlist.schemas.errors import (
    AlreadyClaimedException,
    ErrorCodes,
    InvalidEntitlementException,
    InvalidProofException,
    NotInitializedException,
    ProofTooLongException,
    TransferFailedException,
)
from allowlist.schemas.leaf import Entitlement, LeafScheme

from fixtures import AUTHORITY, POOL, make_coordinator, make_entitlements, make_tree


class TestVerify:
    """Read-only verification."""

    def test_valid_entitlement(self, binary_tree, coordinator_setup):
        coordinator, transfer, events = coordinator_setup
        proof = binary_tree.proof_for("alice").proof

        result = coordinator.verify("alice", 100, proof)

        assert result.valid
        assert result.version == 0
        assert result.root == binary_tree.root
        assert result.event.kind == "proof_verified"
        assert result.event.valid
        # Nothing claimed, nothing moved
        assert not coordinator.has_claimed("alice")
        assert transfer.balance_of("alice") == 0

    def test_wrong_amount_is_invalid(self, binary_tree, coordinator_setup):
        coordinator, _, events = coordinator_setup
        proof = binary_tree.proof_for("alice").proof

        result = coordinator.verify("alice", 101, proof)

        assert not result.valid
        assert events.get_events("proof_verified")[-1].valid is False

    def test_hex_proof_accepted(self, binary_tree, coordinator_setup):
        coordinator, _, _ = coordinator_setup
        proof = [to_hex(p) for p in binary_tree.proof_for("bob").proof]
        assert coordinator.verify("bob", 50, proof).valid

    def test_malformed_proof_element(self, coordinator_setup):
        coordinator, _, _ = coordinator_setup
        with pytest.raises(InvalidProofException) as exc_info:
            coordinator.verify("alice", 100, ["0xdead"])
        assert exc_info.value.details["index"] == 0

    def test_not_initialized(self):
        coordinator = ClaimCoordinator(RootRegistry(), ClaimLedger(), InMemoryTransfer())
        with pytest.raises(NotInitializedException):
            coordinator.verify("alice", 100, [])


class TestClaim:
    """The redemption protocol."""

    def test_alice_claims(self, binary_tree, coordinator_setup):
        coordinator, transfer, events = coordinator_setup
        proof = binary_tree.proof_for("alice").proof

        receipt = coordinator.claim("alice", 100, proof)

        assert receipt.beneficiary == "alice"
        assert receipt.amount == "100"
        assert receipt.version == 0
        assert receipt.transfer_ref.startswith("tx_")
        assert coordinator.has_claimed("alice")
        assert transfer.balance_of("alice") == Decimal(100)
        assert transfer.balance_of(POOL) == Decimal(900)

        redeemed = events.get_events("redeemed")
        assert len(redeemed) == 1
        assert redeemed[0].transfer_ref == receipt.transfer_ref

    def test_bob_with_alice_proof_rejected(self, binary_tree, coordinator_setup):
        coordinator, transfer, events = coordinator_setup
        alice_proof = binary_tree.proof_for("alice").proof

        with pytest.raises(InvalidProofException) as exc_info:
            coordinator.claim("bob", 100, alice_proof)

        assert exc_info.value.code == ErrorCodes.INVALID_PROOF
        assert not coordinator.has_claimed("bob")
        assert transfer.balance_of(POOL) == Decimal(1_000)
        assert events.get_events("redeemed") == []

    def test_inflated_amount_rejected(self, binary_tree, coordinator_setup):
        coordinator, _, _ = coordinator_setup
        proof = binary_tree.proof_for("alice").proof
        with pytest.raises(InvalidProofException):
            coordinator.claim("alice", 1_000, proof)
        assert not coordinator.has_claimed("alice")

    def test_exactly_once(self, binary_tree, coordinator_setup):
        coordinator, transfer, _ = coordinator_setup
        proof = binary_tree.proof_for("alice").proof
        coordinator.claim("alice", 100, proof)

        with pytest.raises(AlreadyClaimedException) as exc_info:
            coordinator.claim("alice", 100, proof)

        assert exc_info.value.message == "Already claimed for merkle root version 0"
        assert transfer.balance_of("alice") == Decimal(100)

    def test_invalid_proof_checked_before_replay(self, binary_tree, coordinator_setup):
        coordinator, _, _ = coordinator_setup
        coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof)
        with pytest.raises(InvalidProofException):
            coordinator.claim("alice", 100, [])

    def test_bad_entitlement_for_scheme(self, binary_tree, coordinator_setup):
        coordinator, _, _ = coordinator_setup
        with pytest.raises(InvalidEntitlementException):
            coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof, token="USDC")

    def test_failing_subscriber_does_not_undo_claim(self, binary_tree, coordinator_setup):
        coordinator, transfer, events = coordinator_setup

        def reject_redeemed(event):
            if event.kind == "redeemed":
                raise RuntimeError("downstream indexer unavailable")

        events.subscribe(reject_redeemed)
        receipt = coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof)

        assert receipt.event is events.get_events("redeemed")[0]
        assert coordinator.has_claimed("alice")
        assert transfer.balance_of("alice") == Decimal(100)
        with pytest.raises(AlreadyClaimedException):
            coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof)


class TestTransferFailure:
    """All-or-nothing semantics around the value transfer."""

    def test_insufficient_funds_rolls_back(self, binary_tree):
        coordinator, transfer, events = make_coordinator(binary_tree, pool_balance=10)
        proof = binary_tree.proof_for("alice").proof

        with pytest.raises(TransferFailedException) as exc_info:
            coordinator.claim("alice", 100, proof)

        assert exc_info.value.retryable
        assert exc_info.value.details["reason"] == "INSUFFICIENT_FUNDS"
        assert not coordinator.has_claimed("alice")
        assert transfer.balance_of(POOL) == Decimal(10)
        assert events.get_events("redeemed") == []

    def test_retry_after_refund_succeeds(self, binary_tree):
        coordinator, transfer, _ = make_coordinator(binary_tree, pool_balance=10)
        proof = binary_tree.proof_for("alice").proof

        with pytest.raises(TransferFailedException):
            coordinator.claim("alice", 100, proof)

        transfer.fund(POOL, 90)
        receipt = coordinator.claim("alice", 100, proof)
        assert receipt.version == 0
        assert transfer.balance_of(POOL) == 0

    def test_denied_transfer(self, binary_tree, coordinator_setup):
        coordinator, transfer, _ = coordinator_setup
        transfer.deny("alice")

        with pytest.raises(TransferFailedException) as exc_info:
            coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof)

        assert exc_info.value.details["reason"] == "TRANSFER_DENIED"
        assert not coordinator.has_claimed("alice")


class TestVersionIsolation:
    """Rotation re-opens the claim window."""

    def test_claim_again_after_rotation(self, binary_tree):
        coordinator, transfer, _ = make_coordinator(binary_tree)
        coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof)

        new_tree = make_tree(make_entitlements({"alice": 30, "bob": 50}))
        coordinator.registry.rotate(AUTHORITY, new_tree.root)

        assert not coordinator.has_claimed("alice")
        assert coordinator.has_claimed("alice", version=0)

        receipt = coordinator.claim("alice", 30, new_tree.proof_for("alice").proof)
        assert receipt.version == 1
        assert transfer.balance_of("alice") == Decimal(130)

    def test_old_proof_fails_after_rotation(self, binary_tree):
        coordinator, _, _ = make_coordinator(binary_tree)
        new_tree = make_tree(make_entitlements({"alice": 30, "bob": 50}))
        coordinator.registry.rotate(AUTHORITY, new_tree.root)

        with pytest.raises(InvalidProofException):
            coordinator.claim("alice", 100, binary_tree.proof_for("alice").proof)

    def test_rotation_to_same_root(self, binary_tree):
        coordinator, _, _ = make_coordinator(binary_tree)
        proof = binary_tree.proof_for("alice").proof
        coordinator.claim("alice", 100, proof)

        coordinator.registry.rotate(AUTHORITY, binary_tree.root)

        # Same root, new version: the old proof is valid and unclaimed again
        assert coordinator.claim("alice", 100, proof).version == 1


class TestProofLength:

    def test_too_long_rejected_before_verification(self, binary_tree):
        coordinator, _, events = make_coordinator(binary_tree, max_proof_depth=2)
        junk = ["not-even-hex"] * 3

        with pytest.raises(ProofTooLongException) as exc_info:
            coordinator.claim("alice", 100, junk)

        assert exc_info.value.details == {"length": 3, "max_depth": 2}
        assert len(events.get_events("proof_verified")) == 0

    def test_at_limit_is_allowed(self):
        tree = make_tree(make_entitlements({f"user{i}": i + 1 for i in range(4)}))
        coordinator, _, _ = make_coordinator(tree, max_proof_depth=2)
        entry = tree.proof_for("user3")
        assert len(entry.proof) == 2
        assert coordinator.claim("user3", 4, entry.proof).amount == "4"

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            ClaimCoordinator(RootRegistry(), ClaimLedger(), InMemoryTransfer(), max_proof_depth=-1)


class TestMultiAsset:

    def test_claim_token(self, multi_asset_tree):
        coordinator, transfer, _ = make_coordinator(multi_asset_tree, tokens=["USDC", "ETH"])
        entry = multi_asset_tree.proof_for("alice")

        receipt = coordinator.claim("alice", Decimal("1.5"), entry.proof, token="USDC")

        assert receipt.amount == "1.50000000"
        assert receipt.token == "USDC"
        assert transfer.balance_of("alice", "USDC") == Decimal("1.5")
        assert transfer.balance_of("alice", "ETH") == 0

    def test_wrong_token_rejected(self, multi_asset_tree):
        coordinator, _, _ = make_coordinator(multi_asset_tree, tokens=["USDC", "ETH"])
        entry = multi_asset_tree.proof_for("bob")
        with pytest.raises(InvalidProofException):
            coordinator.claim("bob", "0.12345678", entry.proof, token="USDC")

    def test_equivalent_amount_forms(self, multi_asset_tree):
        coordinator, _, _ = make_coordinator(multi_asset_tree, tokens=["USDC"])
        entry = multi_asset_tree.proof_for("carol")
        assert coordinator.verify("carol", 250, entry.proof, token="USDC").valid
        assert coordinator.verify("carol", "250.00000000", entry.proof, token="USDC").valid


class TestSingleEntitlement:
    """A one-leaf allowlist: the root is the leaf and the proof is empty."""

    def test_empty_proof_for_only_beneficiary(self):
        tree = make_tree(make_entitlements({"alice": 100}))
        assert tree.root == sha256(b"alice:100")
        assert tree.proof_for("alice").proof == []

        coordinator, _, _ = make_coordinator(tree)

        assert coordinator.verify("alice", 100, []).valid
        assert not coordinator.verify("bob", 100, []).valid
        assert not coordinator.verify("alice", 101, []).valid

    def test_claim_with_empty_proof(self):
        tree = make_tree(make_entitlements({"alice": 100}))
        coordinator, transfer, _ = make_coordinator(tree)

        with pytest.raises(InvalidProofException):
            coordinator.claim("bob", 100, [])
        receipt = coordinator.claim("alice", 100, [])

        assert receipt.amount == "100"
        assert transfer.balance_of("alice") == Decimal(100)
        assert not coordinator.has_claimed("bob")


class TestFromConfig:

    def test_from_config(self):
        config = RuntimeConfig.from_dict({
            "leaf": {"scheme": "multi_asset", "hash_primitive": "keccak256"},
            "claims": {"max_proof_depth": 8, "custodial_pool": "vault"},
        })
        coordinator = ClaimCoordinator.from_config(
            config,
            registry=RootRegistry.create(sha256(b"r"), AUTHORITY),
            ledger=ClaimLedger(),
            transfer=InMemoryTransfer(),
        )
        assert coordinator.leaf_config.scheme == LeafScheme.MULTI_ASSET
        assert coordinator.max_proof_depth == 8
        assert coordinator.custodial_pool == "vault"
        assert coordinator.engine.primitive.value == "keccak256"


def test_leaf_for_matches_tree(binary_tree, coordinator_setup):
    coordinator, _, _ = coordinator_setup
    assert coordinator.leaf_for("bob", 50) == binary_tree.proof_for("bob").leaf
    assert Entitlement(beneficiary="bob", amount=50) == binary_tree.proof_for("bob").entitlement
