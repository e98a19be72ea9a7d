"""
Schemas
File: versioning.py

Purpose: Centralize the tree-file format version.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Format version written into tree files produced by the CLI
TREE_FORMAT_VERSION: str = "v1"

TreeFormatVersion = Literal["v1"]

SUPPORTED_TREE_FORMAT_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedTreeFormatError(ValueError):
    """Raised when a tree file declares an unsupported format version."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_TREE_FORMAT_VERSIONS
        super().__init__(
            f"Unsupported tree format version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_tree_format(version: str) -> None:
    """
    Validate that the given tree format version is supported.

    Raises:
        UnsupportedTreeFormatError: If the version is not supported.
    """
    if version not in SUPPORTED_TREE_FORMAT_VERSIONS:
        raise UnsupportedTreeFormatError(version)
