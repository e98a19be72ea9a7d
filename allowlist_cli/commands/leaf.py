"""
CLI Leaf Command

Print the leaf digest for one entitlement.

Usage:
    allowlist leaf --beneficiary alice --amount 100
    allowlist leaf --beneficiary alice --amount 1.5 --token USDC --scheme multi_asset
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from allowlist.crypto.hashing import HashEngine, serialize_entitlement, to_hex
from allowlist.schemas.errors import InvalidEntitlementException
from allowlist_cli.config import resolve_leaf_config


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def leaf_cmd(args: Namespace) -> int:
    """Execute the leaf command."""
    leaf_config = resolve_leaf_config(args.cli_config, args.scheme, args.hash)
    engine = HashEngine(leaf_config.hash_primitive)

    try:
        preimage = serialize_entitlement(
            leaf_config.scheme, args.beneficiary, args.amount, args.token
        )
    except InvalidEntitlementException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    leaf = engine.hash(preimage)

    if args.json:
        print(json.dumps({
            "scheme": leaf_config.scheme.value,
            "hash_primitive": leaf_config.hash_primitive.value,
            "preimage": preimage.decode("utf-8"),
            "leaf": to_hex(leaf),
        }, indent=2))
    else:
        print(to_hex(leaf))

    return EXIT_SUCCESS
