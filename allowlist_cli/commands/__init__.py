"""
CLI command modules.
"""

from allowlist_cli.commands import leaf, tree, verify

__all__ = ["leaf", "tree", "verify"]
