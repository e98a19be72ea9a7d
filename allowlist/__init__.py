"""
Merkle allowlist verification and claim-settlement engine.

An authority publishes a Merkle root committing to a set of
(beneficiary, amount[, token]) entitlements; holders of an inclusion
proof redeem once per root version.

Usage:
    from allowlist.claims import ClaimCoordinator, ClaimLedger, InMemoryTransfer
    from allowlist.registry import RootRegistry
"""

__version__ = "0.1.0"
