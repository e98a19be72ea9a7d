"""
Merkle Proofs
Class-based interfaces around the Merkle tree functions.

This module provides:
- MerkleVerifier: fold a proof to a root and compare (pure, no side effects)
- MerkleProver: generate roots and proofs from leaf hashes
- AllowlistTree: entitlement-level tree with per-beneficiary proofs,
  ordered by code point on (beneficiary, token)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from allowlist.crypto.hashing import HashEngine, parse_digest, to_hex
from allowlist.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_levels,
    build_merkle_proof,
    build_merkle_root,
    fold_proof,
    proof_from_levels,
)
from allowlist.schemas.leaf import Entitlement, LeafConfig
from allowlist.schemas.versioning import TREE_FORMAT_VERSION, assert_supported_tree_format


class MerkleVerifier:
    """
    Proof-to-root reconstruction and comparison.

    Verification is a pure function of (proof, root, leaf). It imposes no
    bound on proof length; callers that need one check it first.

    Example:
        >>> verifier = MerkleVerifier(HashEngine())
        >>> verifier.verify([], root=leaf, leaf=leaf)
        True
    """

    def __init__(self, engine: Optional[HashEngine] = None) -> None:
        self.engine = engine or HashEngine()

    def compute_root(self, proof: Sequence[bytes], leaf: bytes) -> bytes:
        """Fold the proof over the leaf and return the reconstructed root."""
        return fold_proof(leaf, proof, self.engine)

    def verify(self, proof: Sequence[bytes], root: bytes, leaf: bytes) -> bool:
        """
        Verify that leaf is included under root.

        An empty proof is valid only when leaf == root.

        Args:
            proof: Sibling digests, bottom to top
            root: Expected Merkle root
            leaf: Leaf digest

        Returns:
            True if the proof folds to root, False otherwise
        """
        return self.compute_root(proof, leaf) == root

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Verify a MerkleProof against the root it carries."""
        return self.verify(proof.siblings, proof.root, proof.leaf)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs from leaf hashes.

    Example:
        >>> prover = MerkleProver()
        >>> proof = prover.prove(leaves, index=1)
        >>> proof.leaf == leaves[1]
        True
    """

    def __init__(self, engine: Optional[HashEngine] = None) -> None:
        self.engine = engine or HashEngine()

    def prove(self, leaves: Sequence[bytes], index: int) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf at the given index.

        Raises:
            IndexError: If index is out of range
            ValueError: If leaves is empty
        """
        return build_merkle_proof(leaves, index, self.engine)

    def compute_root(self, leaves: Sequence[bytes]) -> bytes:
        """Compute the Merkle root for a sequence of leaves."""
        return build_merkle_root(leaves, self.engine)


@dataclass(frozen=True)
class AllowlistEntry:
    """One beneficiary's entitlement, leaf and proof inside an AllowlistTree."""
    entitlement: Entitlement
    leaf: bytes
    proof: list[bytes] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "beneficiary": self.entitlement.beneficiary,
            "token": self.entitlement.token,
            "amount": str(self.entitlement.amount),
            "leaf": to_hex(self.leaf),
            "proof": [to_hex(p) for p in self.proof],
        }


@dataclass
class AllowlistTree:
    """
    Off-chain view of an entitlement tree.

    Entitlements are sorted by beneficiary (then token) before hashing so
    that the same set always yields the same root. The sort compares code
    points, not locale collation, so "Zed" orders before "alice" on every
    host. Each beneficiary may appear once, since claims are keyed by
    (version, beneficiary).
    """
    config: LeafConfig
    root: bytes
    entries: dict[str, AllowlistEntry] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        entitlements: Iterable[Entitlement],
        config: Optional[LeafConfig] = None,
    ) -> "AllowlistTree":
        """
        Build a tree and every beneficiary's proof.

        Raises:
            ValueError: If a beneficiary appears more than once
            InvalidEntitlementException: If an entitlement does not fit the scheme
        """
        config = config or LeafConfig()
        engine = HashEngine(config.hash_primitive)

        ordered = sorted(entitlements, key=lambda e: (e.beneficiary, e.token or ""))
        seen: set[str] = set()
        for ent in ordered:
            if ent.beneficiary in seen:
                raise ValueError(f"Duplicate beneficiary in entitlement set: {ent.beneficiary}")
            seen.add(ent.beneficiary)

        leaves = [
            engine.leaf(config.scheme, ent.beneficiary, ent.amount, ent.token)
            for ent in ordered
        ]
        levels = build_merkle_levels(leaves, engine)
        root = levels[-1][0]

        entries: dict[str, AllowlistEntry] = {}
        for index, ent in enumerate(ordered):
            proof = proof_from_levels(levels, index)
            entries[ent.beneficiary] = AllowlistEntry(
                entitlement=ent,
                leaf=leaves[index],
                proof=proof.siblings,
            )

        return cls(config=config, root=root, entries=entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, beneficiary: object) -> bool:
        return beneficiary in self.entries

    def proof_for(self, beneficiary: str) -> Optional[AllowlistEntry]:
        """Return the entry for a beneficiary, or None if not in the tree."""
        return self.entries.get(beneficiary)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON tree-file format."""
        return {
            "format_version": TREE_FORMAT_VERSION,
            "scheme": self.config.scheme.value,
            "hash_primitive": self.config.hash_primitive.value,
            "root": to_hex(self.root),
            "leaf_count": len(self.entries),
            "entries": [entry.to_dict() for entry in self.entries.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AllowlistTree":
        """
        Load a tree file written by to_dict.

        Leaves and proofs are taken from the file as-is; call
        MerkleVerifier on them to check they still fold to the root.
        """
        assert_supported_tree_format(data.get("format_version", TREE_FORMAT_VERSION))
        config = LeafConfig(
            scheme=data["scheme"],
            hash_primitive=data["hash_primitive"],
        )
        entries: dict[str, AllowlistEntry] = {}
        for item in data.get("entries", []):
            ent = Entitlement(
                beneficiary=item["beneficiary"],
                amount=item["amount"],
                token=item.get("token"),
            )
            entries[ent.beneficiary] = AllowlistEntry(
                entitlement=ent,
                leaf=parse_digest(item["leaf"]),
                proof=[parse_digest(p) for p in item.get("proof", [])],
            )
        return cls(config=config, root=parse_digest(data["root"]), entries=entries)


__all__ = [
    "MerkleVerifier",
    "MerkleProver",
    "AllowlistEntry",
    "AllowlistTree",
]
