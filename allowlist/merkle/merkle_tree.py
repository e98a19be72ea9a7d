"""
Merkle Tree Implementation
Sorted-pair Merkle tree construction, proof generation, and verification.

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf index
- Merkle proof verification by left-to-right fold
- Promotion rule for odd number of nodes

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: see HashEngine.leaf (scheme dependent)
2. Parent hashing: parent = H(min(a, b) + max(a, b))
3. Odd rule: the last node of an odd level is promoted unchanged
4. Empty leaves: build_merkle_root([]) returns 32 zero bytes
5. Single leaf: root = leaf, proof = []

Because siblings are sorted before hashing, a proof is just the list of
sibling digests from bottom to top. No index or left/right flags travel
with it, and a level where the node was promoted contributes nothing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from allowlist.crypto.hashing import DIGEST_SIZE, HashEngine


# Empty tree sentinel
EMPTY_TREE_ROOT: bytes = bytes(DIGEST_SIZE)

_DEFAULT_ENGINE = HashEngine()


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = EMPTY_TREE_ROOT

    @property
    def depth(self) -> int:
        return len(self.siblings)


def merkle_parent(left: bytes, right: bytes, engine: Optional[HashEngine] = None) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Children are sorted before hashing, so merkle_parent(a, b) == merkle_parent(b, a).
    """
    return (engine or _DEFAULT_ENGINE).combine(left, right)


def build_merkle_levels(
    leaves: Sequence[bytes],
    engine: Optional[HashEngine] = None,
) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first, root last.

    Promotion Rule: an odd trailing node moves up unchanged.
    Example: [a, b, c] -> [parent(a,b), c] -> [parent(parent(a,b), c)]
    """
    engine = engine or _DEFAULT_ENGINE
    if len(leaves) == 0:
        return [[EMPTY_TREE_ROOT]]

    levels: list[list[bytes]] = [list(leaves)]
    current_level = levels[0]

    while len(current_level) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current_level) - 1, 2):
            next_level.append(engine.combine(current_level[i], current_level[i + 1]))
        if len(current_level) % 2 == 1:
            next_level.append(current_level[-1])
        levels.append(next_level)
        current_level = next_level

    return levels


def build_merkle_root(
    leaves: Sequence[bytes],
    engine: Optional[HashEngine] = None,
) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Args:
        leaves: Sequence of leaf hashes. Order is preserved.
        engine: HashEngine bound to the deployment's primitive (SHA-256 by default)

    Returns:
        32-byte Merkle root

    Example:
        >>> leaves = [sha256(b"a"), sha256(b"b"), sha256(b"c")]
        >>> len(build_merkle_root(leaves))
        32
    """
    return build_merkle_levels(leaves, engine)[-1][0]


def proof_from_levels(levels: Sequence[Sequence[bytes]], index: int) -> MerkleProof:
    """
    Read the proof for leaf `index` out of levels already built by
    build_merkle_levels. Building every proof of a tree this way costs
    O(n log n) instead of rebuilding the tree per leaf.

    Raises:
        IndexError: If index is out of range for the leaf level
    """
    leaves = levels[0]
    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    siblings: list[bytes] = []
    current_index = index

    for level in levels[:-1]:
        sibling_index = current_index ^ 1
        # A promoted node has no sibling at this level
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index = current_index // 2

    return MerkleProof(
        leaf=leaves[index],
        siblings=siblings,
        root=levels[-1][0],
    )


def build_merkle_proof(
    leaves: Sequence[bytes],
    index: int,
    engine: Optional[HashEngine] = None,
) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot generate proof for empty leaf list")

    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    return proof_from_levels(build_merkle_levels(leaves, engine), index)


def fold_proof(
    leaf: bytes,
    siblings: Sequence[bytes],
    engine: Optional[HashEngine] = None,
) -> bytes:
    """
    Reconstruct a root from a leaf and its proof.

    running = leaf; for each sibling: running = combine(running, sibling)
    """
    engine = engine or _DEFAULT_ENGINE
    running = leaf
    for sibling in siblings:
        running = engine.combine(running, sibling)
    return running


def verify_merkle_proof(proof: MerkleProof, engine: Optional[HashEngine] = None) -> bool:
    """
    Verify a Merkle proof against the root it carries.

    Returns:
        True if the proof folds to proof.root, False otherwise
    """
    return fold_proof(proof.leaf, proof.siblings, engine) == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the longest proof length for a tree with the given number of leaves.

    A single leaf needs no siblings (depth 0); two leaves need one, and so on.
    """
    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleProof",
    "merkle_parent",
    "build_merkle_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_levels",
    "fold_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
