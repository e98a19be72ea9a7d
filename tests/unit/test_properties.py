"""
Randomized Property Tests

Seeded so failures reproduce:
1. Round trip - every proof verifies for its own leaf, fails for every other leaf
2. Tamper sensitivity - one flipped bit anywhere in the proof, the root, the leaf
   digest or its preimage breaks verification
"""
import random

import pytest

from allowlist.crypto.hashing import HashEngine, serialize_entitlement
from allowlist.merkle import AllowlistTree, MerkleVerifier
from allowlist.schemas.leaf import Entitlement, HashPrimitive, LeafConfig, LeafScheme


SEED = 20240601
TREES = 40


def _random_tree(rng: random.Random, primitive: HashPrimitive) -> AllowlistTree:
    size = rng.randint(1, 40)
    ents = [
        Entitlement(beneficiary=f"user-{i}-{rng.getrandbits(32):08x}", amount=rng.randint(0, 10**12))
        for i in range(size)
    ]
    return AllowlistTree.build(ents, LeafConfig(scheme=LeafScheme.BINARY, hash_primitive=primitive))


def _flip_bit(data: bytes, rng: random.Random) -> bytes:
    buf = bytearray(data)
    pos = rng.randrange(len(buf) * 8)
    buf[pos // 8] ^= 1 << (pos % 8)
    return bytes(buf)


@pytest.mark.slow
@pytest.mark.parametrize("primitive", list(HashPrimitive))
class TestRandomTrees:

    def test_round_trip(self, primitive):
        rng = random.Random(SEED)
        verifier = MerkleVerifier(HashEngine(primitive))

        for _ in range(TREES):
            tree = _random_tree(rng, primitive)
            entries = list(tree.entries.values())
            for entry in entries:
                assert verifier.verify(entry.proof, tree.root, entry.leaf)

            if len(entries) > 1:
                own, other = rng.sample(entries, 2)
                assert not verifier.verify(own.proof, tree.root, other.leaf)

    def test_tamper_sensitivity(self, primitive):
        rng = random.Random(SEED + 1)
        engine = HashEngine(primitive)
        verifier = MerkleVerifier(engine)

        for _ in range(TREES):
            tree = _random_tree(rng, primitive)
            entry = rng.choice(list(tree.entries.values()))
            ent = entry.entitlement

            # Flipped root
            assert not verifier.verify(entry.proof, _flip_bit(tree.root, rng), entry.leaf)

            # Flipped sibling
            if entry.proof:
                i = rng.randrange(len(entry.proof))
                tampered = list(entry.proof)
                tampered[i] = _flip_bit(tampered[i], rng)
                assert not verifier.verify(tampered, tree.root, entry.leaf)

            # Flipped leaf digest
            assert not verifier.verify(entry.proof, tree.root, _flip_bit(entry.leaf, rng))

            # Flipped bit in the leaf preimage
            preimage = serialize_entitlement(LeafScheme.BINARY, ent.beneficiary, ent.amount)
            assert engine.hash(preimage) == entry.leaf
            assert not verifier.verify(entry.proof, tree.root, engine.hash(_flip_bit(preimage, rng)))

            # Changed leaf input
            bumped = engine.leaf(LeafScheme.BINARY, ent.beneficiary, int(ent.amount) + 1)
            assert not verifier.verify(entry.proof, tree.root, bumped)
            renamed = engine.leaf(LeafScheme.BINARY, ent.beneficiary + "x", ent.amount)
            assert not verifier.verify(entry.proof, tree.root, renamed)
