"""
Root Registry Module

Current root, monotonic version counter and authority-gated rotation.
"""

from .root_registry import (
    MAX_VERSION,
    RootRecord,
    RootRegistry,
    RootSnapshot,
    RootState,
)

__all__ = [
    "MAX_VERSION",
    "RootRecord",
    "RootRegistry",
    "RootSnapshot",
    "RootState",
]
