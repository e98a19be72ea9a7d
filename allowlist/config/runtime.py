"""
Runtime Configuration

Central configuration for leaf scheme selection, claim limits, and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from allowlist.schemas.leaf import HashPrimitive, LeafConfig, LeafScheme

load_dotenv()


@dataclass
class LeafSettings:
    """Leaf scheme and hash primitive for this deployment."""
    scheme: str = LeafScheme.BINARY.value
    hash_primitive: str = HashPrimitive.SHA256.value

    def __post_init__(self):
        # Fail early on unknown tags
        self.scheme = LeafScheme(self.scheme).value
        self.hash_primitive = HashPrimitive(self.hash_primitive).value

    def to_leaf_config(self) -> LeafConfig:
        return LeafConfig(scheme=self.scheme, hash_primitive=self.hash_primitive)


@dataclass
class ClaimsSettings:
    """Configuration for the claim coordinator."""
    max_proof_depth: int = 32
    custodial_pool: str = "custodial-pool"
    # token -> amount credited to the custodial pool when the API host starts
    pool_balances: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.max_proof_depth = int(self.max_proof_depth)
        if self.max_proof_depth < 0:
            raise ValueError(f"max_proof_depth must be non-negative, got {self.max_proof_depth}")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the allowlist engine.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    leaf: LeafSettings = field(default_factory=LeafSettings)
    claims: ClaimsSettings = field(default_factory=ClaimsSettings)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - ALLOWLIST_LEAF_SCHEME: binary | multi_asset
        - ALLOWLIST_HASH_PRIMITIVE: sha256 | keccak256
        - ALLOWLIST_MAX_PROOF_DEPTH: maximum accepted proof length
        - ALLOWLIST_CUSTODIAL_POOL: account that funds redemptions
        - ALLOWLIST_LOG_LEVEL: log level name
        """
        overrides: dict[str, Any] = {}

        # Leaf settings
        if os.getenv("ALLOWLIST_LEAF_SCHEME"):
            overrides.setdefault("leaf", {})["scheme"] = os.getenv("ALLOWLIST_LEAF_SCHEME")
        if os.getenv("ALLOWLIST_HASH_PRIMITIVE"):
            overrides.setdefault("leaf", {})["hash_primitive"] = os.getenv("ALLOWLIST_HASH_PRIMITIVE")

        # Claim settings
        if os.getenv("ALLOWLIST_MAX_PROOF_DEPTH"):
            overrides.setdefault("claims", {})["max_proof_depth"] = int(
                os.getenv("ALLOWLIST_MAX_PROOF_DEPTH", "32")
            )
        if os.getenv("ALLOWLIST_CUSTODIAL_POOL"):
            overrides.setdefault("claims", {})["custodial_pool"] = os.getenv("ALLOWLIST_CUSTODIAL_POOL")

        # Logging
        if os.getenv("ALLOWLIST_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("ALLOWLIST_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        leaf_data = data.get("leaf", {})
        claims_data = data.get("claims", {})

        leaf = LeafSettings(**leaf_data) if leaf_data else LeafSettings()
        claims = ClaimsSettings(**claims_data) if claims_data else ClaimsSettings()

        return cls(
            leaf=leaf,
            claims=claims,
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        if "leaf" in overrides:
            merged = {**self.leaf.__dict__, **overrides["leaf"]}
            new_config.leaf = LeafSettings(**merged)

        if "claims" in overrides:
            merged = {**self.claims.__dict__, **overrides["claims"]}
            new_config.claims = ClaimsSettings(**merged)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "leaf": {
                "scheme": self.leaf.scheme,
                "hash_primitive": self.leaf.hash_primitive,
            },
            "claims": {
                "max_proof_depth": self.claims.max_proof_depth,
                "custodial_pool": self.claims.custodial_pool,
                "pool_balances": dict(self.claims.pool_balances),
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
