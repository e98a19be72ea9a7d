"""
Merkle Tree and Commitments
Sorted-pair Merkle tree construction + proof generation/verification.

This module provides:
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_root: Compute root from leaf hashes
- build_merkle_proof: Generate proof for a specific leaf
- proof_from_levels: Read proofs out of already-built levels
- verify_merkle_proof / MerkleVerifier: Verify a proof against a root
- AllowlistTree: Entitlement-level tree with per-beneficiary proofs

Canonical Commitment Rules:
1. Leaf hashing: HashEngine.leaf(scheme, beneficiary, amount, token)
2. Parent hashing: H(min(a, b) + max(a, b))
3. Odd rule: promote the trailing node unchanged
4. Empty tree: 32 zero bytes
5. Single leaf: root = leaf

Usage:
    from allowlist.merkle import AllowlistTree, MerkleVerifier

    tree = AllowlistTree.build(entitlements, config)
    entry = tree.proof_for("alice")
    assert MerkleVerifier(engine).verify(entry.proof, tree.root, entry.leaf)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    merkle_parent,
    build_merkle_levels,
    build_merkle_root,
    build_merkle_proof,
    proof_from_levels,
    fold_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
    AllowlistEntry,
    AllowlistTree,
)


__all__ = [
    # Core types
    "MerkleProof",
    "EMPTY_TREE_ROOT",
    # Core functions
    "merkle_parent",
    "build_merkle_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_levels",
    "fold_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
    "AllowlistEntry",
    "AllowlistTree",
]
