"""
CLI Configuration

Configuration loading for the allowlist CLI.
The engine settings live in a RuntimeConfig; the CLI adds only its own
output and log-file options on top.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from allowlist.config.runtime import RuntimeConfig
from allowlist.schemas.leaf import LeafConfig


# Environment variable prefix
ENV_PREFIX = "ALLOWLIST_"

DEFAULT_CONFIG_PATHS = [
    Path("allowlist.yaml"),
    Path(".allowlist.yaml"),
    Path.home() / ".config" / "allowlist" / "config.yaml",
]


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_file: str | None = None

    @property
    def log_level(self) -> str:
        return self.runtime.log_level


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    runtime = RuntimeConfig()

    if config_path is not None:
        runtime = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                runtime = RuntimeConfig.from_yaml(default_path)
                break

    return CLIConfig(
        runtime=runtime.with_env_overrides(),
        log_file=os.getenv(f"{ENV_PREFIX}LOG_FILE"),
    )


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# Merkle allowlist configuration
leaf:
  scheme: binary            # binary | multi_asset
  hash_primitive: sha256    # sha256 | keccak256

claims:
  max_proof_depth: 32
  custodial_pool: custodial-pool
  pool_balances: {}         # token -> amount credited to the pool at API start

log_level: INFO
"""


def resolve_leaf_config(config: CLIConfig, scheme: str | None, hash_primitive: str | None) -> LeafConfig:
    """Leaf config from the loaded settings, with command-line flags taking precedence."""
    return LeafConfig(
        scheme=scheme or config.runtime.leaf.scheme,
        hash_primitive=hash_primitive or config.runtime.leaf.hash_primitive,
    )
