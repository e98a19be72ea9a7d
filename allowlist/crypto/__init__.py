"""
Core cryptographic utilities.

Hash primitives, canonical entitlement serialization and the HashEngine.
"""
from .hashing import (
    DIGEST_SIZE,
    MAX_BINARY_AMOUNT,
    MULTI_ASSET_DECIMALS,
    sha256,
    keccak256,
    get_hash_function,
    to_hex,
    from_hex,
    parse_digest,
    format_amount,
    serialize_entitlement,
    HashEngine,
)

__all__ = [
    "DIGEST_SIZE",
    "MAX_BINARY_AMOUNT",
    "MULTI_ASSET_DECIMALS",
    "sha256",
    "keccak256",
    "get_hash_function",
    "to_hex",
    "from_hex",
    "parse_digest",
    "format_amount",
    "serialize_entitlement",
    "HashEngine",
]
