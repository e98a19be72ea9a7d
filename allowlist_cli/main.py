"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m allowlist_cli leaf --beneficiary B --amount A [--token T] [--json]
    python -m allowlist_cli tree ENTITLEMENTS.json [--out FILE]
    python -m allowlist_cli verify --root R --beneficiary B --amount A [--token T] --proof P1,P2 [--json]
    python -m allowlist_cli config --init [--path FILE]
    python -m allowlist_cli config --show

Environment Variables:
    ALLOWLIST_LEAF_SCHEME       Leaf scheme: binary, multi_asset (default: binary)
    ALLOWLIST_HASH_PRIMITIVE    Hash primitive: sha256, keccak256 (default: sha256)
    ALLOWLIST_MAX_PROOF_DEPTH   Maximum accepted proof length (default: 32)
    ALLOWLIST_CUSTODIAL_POOL    Account that funds redemptions
    ALLOWLIST_LOG_LEVEL         Log level (default: INFO)
    ALLOWLIST_LOG_FILE          Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

import yaml

from allowlist.schemas.leaf import HashPrimitive, LeafScheme
from allowlist_cli.commands import leaf, tree, verify
from allowlist_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_leaf_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scheme",
        type=str,
        choices=[s.value for s in LeafScheme],
        default=None,
        help="Leaf scheme (default: from config)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        choices=[h.value for h in HashPrimitive],
        default=None,
        help="Hash primitive (default: from config)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="allowlist",
        description="Merkle allowlist CLI - Build entitlement trees and verify proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./allowlist.yaml or ~/.config/allowlist/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- leaf command ---
    leaf_parser = subparsers.add_parser(
        "leaf",
        help="Print the leaf digest for one entitlement",
    )
    leaf_parser.add_argument("--beneficiary", "-b", type=str, required=True, help="Beneficiary identity")
    leaf_parser.add_argument("--amount", "-a", type=str, required=True, help="Entitled amount")
    leaf_parser.add_argument("--token", "-t", type=str, default=None, help="Token id (multi_asset scheme)")
    leaf_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    _add_leaf_options(leaf_parser)
    leaf_parser.set_defaults(func=leaf.leaf_cmd)

    # --- tree command ---
    tree_parser = subparsers.add_parser(
        "tree",
        help="Build a root and per-beneficiary proofs",
        description="Build a Merkle tree from a JSON entitlements file.",
    )
    tree_parser.add_argument(
        "entitlements",
        type=str,
        help="Path to entitlements JSON file",
    )
    tree_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the tree file here instead of stdout",
    )
    _add_leaf_options(tree_parser)
    tree_parser.set_defaults(func=tree.tree_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an entitlement proof offline",
        description="Fold a proof over the entitlement's leaf and compare with a root.",
    )
    verify_parser.add_argument("--root", "-r", type=str, required=True, help="Merkle root (0x-prefixed)")
    verify_parser.add_argument("--beneficiary", "-b", type=str, required=True, help="Beneficiary identity")
    verify_parser.add_argument("--amount", "-a", type=str, required=True, help="Entitled amount")
    verify_parser.add_argument("--token", "-t", type=str, default=None, help="Token id (multi_asset scheme)")
    verify_parser.add_argument(
        "--proof", "-p",
        type=str,
        default="",
        help="Comma-separated sibling digests, bottom to top",
    )
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    _add_leaf_options(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="allowlist.yaml",
        help="Path for config file (default: allowlist.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (ALLOWLIST_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.runtime.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: allowlist config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
