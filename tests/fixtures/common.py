"""
Common test fixtures shared by all modules.

Provides factory functions for the core allowlist structures:
- Entitlement sets
- AllowlistTree
- A fully wired ClaimCoordinator (registry + ledger + funded pool)

These are the foundational building blocks used by higher-level tests.
"""

from decimal import Decimal
from typing import Optional

from allowlist.claims import ClaimCoordinator, ClaimLedger, InMemoryTransfer
from allowlist.events import EventRecorder
from allowlist.merkle import AllowlistTree
from allowlist.registry import RootRegistry
from allowlist.schemas.leaf import Entitlement, HashPrimitive, LeafConfig, LeafScheme


AUTHORITY = "treasury-admin"
POOL = "custodial-pool"


# =============================================================================
# Entitlement Factories
# =============================================================================

def make_entitlements(amounts: Optional[dict[str, int]] = None) -> list[Entitlement]:
    """
    Create a binary-scheme entitlement set.

    Args:
        amounts: beneficiary -> amount (default: alice 100, bob 50)
    """
    if amounts is None:
        amounts = {"alice": 100, "bob": 50}
    return [Entitlement(beneficiary=b, amount=a) for b, a in amounts.items()]


def make_multi_asset_entitlements() -> list[Entitlement]:
    """Create a multi-asset entitlement set with fractional amounts."""
    return [
        Entitlement(beneficiary="alice", amount="1.5", token="USDC"),
        Entitlement(beneficiary="bob", amount="0.12345678", token="ETH"),
        Entitlement(beneficiary="carol", amount="250", token="USDC"),
    ]


def make_tree(
    entitlements: Optional[list[Entitlement]] = None,
    scheme: LeafScheme = LeafScheme.BINARY,
    hash_primitive: HashPrimitive = HashPrimitive.SHA256,
) -> AllowlistTree:
    """Build an AllowlistTree for an entitlement set."""
    if entitlements is None:
        entitlements = make_entitlements()
    return AllowlistTree.build(
        entitlements,
        LeafConfig(scheme=scheme, hash_primitive=hash_primitive),
    )


# =============================================================================
# Coordinator Factory
# =============================================================================

def make_coordinator(
    tree: Optional[AllowlistTree] = None,
    pool_balance: Decimal | int = 1_000,
    max_proof_depth: int = 32,
    tokens: Optional[list[str]] = None,
) -> tuple[ClaimCoordinator, InMemoryTransfer, EventRecorder]:
    """
    Create a coordinator over an initialized registry and a funded pool.

    Args:
        tree: Tree whose root initializes the registry (default: make_tree())
        pool_balance: Balance credited to the pool for each token
        max_proof_depth: Proof length limit
        tokens: Tokens to fund (default: the native token only)

    Returns:
        (coordinator, transfer, events)
    """
    if tree is None:
        tree = make_tree()

    events = EventRecorder()
    registry = RootRegistry(events=events)
    registry.initialize(tree.root, AUTHORITY, leaf_count=len(tree))

    transfer = InMemoryTransfer()
    for token in tokens or [None]:
        transfer.fund(POOL, pool_balance, token)

    coordinator = ClaimCoordinator(
        registry=registry,
        ledger=ClaimLedger(),
        transfer=transfer,
        leaf_config=tree.config,
        max_proof_depth=max_proof_depth,
        custodial_pool=POOL,
        events=events,
    )
    return coordinator, transfer, events
