"""
Runtime Configuration Module

Provides configuration loading and management for the allowlist engine.
"""

from .runtime import (
    ClaimsSettings,
    LeafSettings,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "LeafSettings",
    "ClaimsSettings",
    "get_default_config",
    "set_default_config",
]
