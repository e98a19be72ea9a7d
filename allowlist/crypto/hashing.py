"""
Hashing Utilities
Hash primitives, canonical entitlement serialization and the HashEngine.

This module provides:
- SHA-256 and Keccak-256 hashing for raw bytes
- Canonical leaf serialization for the binary and multi-asset schemes
- Sorted pairwise node combination
- Hex encoding/decoding with 0x prefix

Canonical Commitment Rules (Hard Contracts):
1. Binary leaf:      H("<beneficiary>:<amount>")            amount = unsigned integer
2. Multi-asset leaf: H("<beneficiary>:<token>:<amount>")    amount = 8 fractional digits
3. Node:             H(min(a, b) + max(a, b))               lexicographic byte order
4. Strings are UTF-8 encoded, no whitespace, no padding

Any divergence from these rules on the tree-building side breaks every proof.
"""
from __future__ import annotations

import hashlib
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Optional

from eth_utils import keccak

from allowlist.schemas.errors import InvalidEntitlementException
from allowlist.schemas.leaf import Amount, HashPrimitive, LeafScheme


DIGEST_SIZE = 32

# Largest amount representable by the binary scheme (unsigned 64-bit)
MAX_BINARY_AMOUNT = 2**64 - 1

# Multi-asset amounts are always rendered with exactly this many decimals
MULTI_ASSET_DECIMALS = 8
_MULTI_ASSET_QUANTUM = Decimal(1).scaleb(-MULTI_ASSET_DECIMALS)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes (the pre-standard variant used by EVM chains).

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


_PRIMITIVES: dict[HashPrimitive, Callable[[bytes], bytes]] = {
    HashPrimitive.SHA256: sha256,
    HashPrimitive.KECCAK256: keccak256,
}


def get_hash_function(primitive: HashPrimitive | str) -> Callable[[bytes], bytes]:
    """Resolve a hash primitive tag to its hash function."""
    return _PRIMITIVES[HashPrimitive(primitive)]


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def parse_digest(value: bytes | str) -> bytes:
    """
    Accept a digest as raw bytes or 0x-hex and return exactly 32 bytes.

    Raises:
        ValueError: If the value is not a 32-byte digest
    """
    digest = from_hex(value) if isinstance(value, str) else bytes(value)
    if len(digest) != DIGEST_SIZE:
        raise ValueError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(digest)}"
        )
    return digest


# =============================================================================
# Canonical entitlement serialization
# =============================================================================

def _to_decimal(amount: Amount | float) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidEntitlementException(
            "Amount must be numeric, got bool", field_path="amount"
        )
    try:
        # Floats convert exactly, so rounding sees the binary value as toFixed does
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidEntitlementException(
            f"Amount is not a number: {amount!r}", field_path="amount"
        ) from e
    if not value.is_finite():
        raise InvalidEntitlementException(
            f"Amount must be finite, got {amount!r}", field_path="amount"
        )
    if value < 0:
        raise InvalidEntitlementException(
            f"Amount must be non-negative, got {amount!r}", field_path="amount"
        )
    return value


def format_amount(scheme: LeafScheme | str, amount: Amount | float) -> str:
    """
    Render an amount exactly as it appears in the leaf preimage.

    Binary scheme: unsigned integer decimal (``100``).
    Multi-asset scheme: fixed point, 8 fractional digits, half-up (``100.00000000``).

    Raises:
        InvalidEntitlementException: If the amount cannot be represented
    """
    scheme = LeafScheme(scheme)
    value = _to_decimal(amount)

    if scheme == LeafScheme.BINARY:
        if value != value.to_integral_value():
            raise InvalidEntitlementException(
                f"Binary scheme requires an integer amount, got {amount!r}",
                field_path="amount",
            )
        integral = int(value)
        if integral > MAX_BINARY_AMOUNT:
            raise InvalidEntitlementException(
                f"Amount {integral} exceeds unsigned 64-bit range",
                field_path="amount",
            )
        return str(integral)

    try:
        quantized = value.quantize(_MULTI_ASSET_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidEntitlementException(
            f"Amount {amount!r} exceeds decimal precision", field_path="amount"
        ) from e
    return format(quantized, "f")


def serialize_entitlement(
    scheme: LeafScheme | str,
    beneficiary: str,
    amount: Amount | float,
    token: Optional[str] = None,
) -> bytes:
    """
    Build the UTF-8 leaf preimage for an entitlement.

    Raises:
        InvalidEntitlementException: If fields are missing or malformed
    """
    scheme = LeafScheme(scheme)
    if not beneficiary:
        raise InvalidEntitlementException(
            "Beneficiary identity must not be empty", field_path="beneficiary"
        )

    amount_str = format_amount(scheme, amount)

    if scheme == LeafScheme.BINARY:
        if token is not None:
            raise InvalidEntitlementException(
                "Binary scheme does not carry a token identifier",
                field_path="token",
            )
        data = f"{beneficiary}:{amount_str}"
    else:
        if not token:
            raise InvalidEntitlementException(
                "Multi-asset scheme requires a token identifier",
                field_path="token",
            )
        data = f"{beneficiary}:{token}:{amount_str}"

    return data.encode("utf-8")


# =============================================================================
# HashEngine
# =============================================================================

class HashEngine:
    """
    Canonical leaf hashing and sorted pairwise node combination.

    One engine is bound to one hash primitive. Both the verifier and the
    tree builder must use engines with the same primitive.

    Example:
        >>> engine = HashEngine(HashPrimitive.SHA256)
        >>> leaf = engine.leaf(LeafScheme.BINARY, "alice", 100)
        >>> leaf == sha256(b"alice:100")
        True
    """

    def __init__(self, primitive: HashPrimitive | str = HashPrimitive.SHA256) -> None:
        self.primitive = HashPrimitive(primitive)
        self._hash = get_hash_function(self.primitive)

    def hash(self, data: bytes) -> bytes:
        """Hash raw bytes with the bound primitive."""
        return self._hash(data)

    def leaf(
        self,
        scheme: LeafScheme | str,
        beneficiary: str,
        amount: Amount | float,
        token: Optional[str] = None,
    ) -> bytes:
        """
        Compute the leaf digest for an entitlement.

        Raises:
            InvalidEntitlementException: If the entitlement is malformed for the scheme
        """
        return self._hash(serialize_entitlement(scheme, beneficiary, amount, token))

    def combine(self, left: bytes, right: bytes) -> bytes:
        """
        Hash two child digests in sorted order.

        The structural position of the children is irrelevant: the smaller
        digest is always hashed first.
        """
        if left <= right:
            return self._hash(left + right)
        return self._hash(right + left)

    def __repr__(self) -> str:
        return f"HashEngine(primitive={self.primitive.value!r})"


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
