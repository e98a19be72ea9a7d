"""
Test fixtures package for allowlist tests.

This package provides factory functions for creating test objects:
- common.py: entitlement sets, trees and a wired coordinator

Usage:
    from fixtures import make_tree, make_coordinator

    def test_something():
        tree = make_tree()
        coordinator, transfer, events = make_coordinator(tree)
"""

from .common import (
    AUTHORITY,
    POOL,
    make_entitlements,
    make_multi_asset_entitlements,
    make_tree,
    make_coordinator,
)

__all__ = [
    "AUTHORITY",
    "POOL",
    "make_entitlements",
    "make_multi_asset_entitlements",
    "make_tree",
    "make_coordinator",
]
