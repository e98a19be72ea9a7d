"""
CLI Verify Command

Verify an entitlement proof offline against a given root.

Usage:
    allowlist verify --root 0x... --beneficiary alice --amount 100 --proof 0xaa..,0xbb.. [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any, Optional

from allowlist.crypto.hashing import HashEngine, parse_digest, to_hex
from allowlist.merkle import MerkleVerifier
from allowlist.schemas.errors import InvalidEntitlementException
from allowlist_cli.config import resolve_leaf_config


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    beneficiary: str
    amount: str
    token: Optional[str]
    root: str
    leaf: str
    computed_root: str
    proof_length: int
    valid: bool

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["token"] is None:
            del d["token"]
        return d


def parse_proof_arg(raw: str) -> list[bytes]:
    """Split a comma-separated proof argument into digests."""
    return [parse_digest(p.strip()) for p in raw.split(",") if p.strip()]


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"beneficiary: {summary.beneficiary}")
    print(f"amount: {summary.amount}")
    if summary.token is not None:
        print(f"token: {summary.token}")
    print(f"leaf: {summary.leaf}")
    print(f"root: {summary.root}")
    print(f"computed_root: {summary.computed_root}")
    print(f"proof_length: {summary.proof_length}")
    print(f"valid: {str(summary.valid).lower()}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 if the proof folds to the root, 2 if it does not, 1 on bad input
    """
    leaf_config = resolve_leaf_config(args.cli_config, args.scheme, args.hash)
    engine = HashEngine(leaf_config.hash_primitive)

    try:
        root = parse_digest(args.root)
        proof = parse_proof_arg(args.proof or "")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        leaf = engine.leaf(leaf_config.scheme, args.beneficiary, args.amount, args.token)
    except InvalidEntitlementException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    verifier = MerkleVerifier(engine)
    computed = verifier.compute_root(proof, leaf)
    summary = VerifySummary(
        beneficiary=args.beneficiary,
        amount=str(args.amount),
        token=args.token,
        root=to_hex(root),
        leaf=to_hex(leaf),
        computed_root=to_hex(computed),
        proof_length=len(proof),
        valid=computed == root,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
