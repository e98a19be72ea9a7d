"""
CLI Tree Command

Build a Merkle root and every beneficiary's proof from an entitlements file.

The input is JSON, either a list of entitlements or an object with an
"entitlements" list:

    [{"beneficiary": "alice", "amount": 100}, {"beneficiary": "bob", "amount": 50}]

Usage:
    allowlist tree entitlements.json [--out tree.json] [--scheme multi_asset]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from allowlist.merkle import AllowlistTree
from allowlist.schemas.errors import InvalidEntitlementException
from allowlist.schemas.leaf import Entitlement
from allowlist_cli.config import resolve_leaf_config


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_entitlements(path: Path) -> list[Entitlement]:
    """
    Read entitlements from a JSON file.

    Raises:
        ValueError: If the file does not hold an entitlement list
        ValidationError: If an entry is malformed
    """
    with open(path, "r") as f:
        data: Any = json.load(f)

    if isinstance(data, dict):
        data = data.get("entitlements")
    if not isinstance(data, list):
        raise ValueError("Expected a list of entitlements or {\"entitlements\": [...]}")

    return [Entitlement.model_validate(item) for item in data]


def tree_cmd(args: Namespace) -> int:
    """Execute the tree command."""
    path = Path(args.entitlements)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    leaf_config = resolve_leaf_config(args.cli_config, args.scheme, args.hash)

    try:
        entitlements = load_entitlements(path)
        tree = AllowlistTree.build(entitlements, leaf_config)
    except (ValueError, ValidationError) as e:
        print(f"Error reading entitlements: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except InvalidEntitlementException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Built tree with {len(tree)} leaves")
    output = json.dumps(tree.to_dict(), indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output + "\n")
        print(f"root: {tree.to_dict()['root']}")
        print(f"leaf_count: {len(tree)}")
        print(f"written: {out_path}")
    else:
        print(output)

    return EXIT_SUCCESS
