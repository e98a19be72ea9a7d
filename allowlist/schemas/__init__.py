"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    SUPPORTED_TREE_FORMAT_VERSIONS,
    TREE_FORMAT_VERSION,
    TreeFormatVersion,
    UnsupportedTreeFormatError,
    assert_supported_tree_format,
)

# Error models and exceptions
from .errors import (
    AllowlistError,
    AllowlistException,
    AlreadyClaimedException,
    AlreadyInitializedException,
    ErrorCodes,
    InvalidEntitlementException,
    InvalidProofException,
    NotInitializedException,
    ProofTooLongException,
    TransferFailedException,
    UnauthorizedException,
)

# Leaf configuration
from .leaf import (
    Amount,
    Entitlement,
    HashPrimitive,
    LeafConfig,
    LeafScheme,
)

__all__ = [
    # Versioning
    "TREE_FORMAT_VERSION",
    "SUPPORTED_TREE_FORMAT_VERSIONS",
    "TreeFormatVersion",
    "UnsupportedTreeFormatError",
    "assert_supported_tree_format",
    # Errors
    "ErrorCodes",
    "AllowlistError",
    "AllowlistException",
    "UnauthorizedException",
    "AlreadyInitializedException",
    "NotInitializedException",
    "InvalidProofException",
    "ProofTooLongException",
    "InvalidEntitlementException",
    "AlreadyClaimedException",
    "TransferFailedException",
    # Leaf
    "Amount",
    "Entitlement",
    "HashPrimitive",
    "LeafConfig",
    "LeafScheme",
]
