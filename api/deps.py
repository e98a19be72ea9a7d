"""
API Dependencies

Dependency injection for the API.
Provides the process-wide AllowlistService and the caller identity.

The engine takes no locks of its own. This host serializes every
state-touching request with one lock, which is the transactional
isolation the coordinator relies on.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Header

from allowlist.claims import ClaimCoordinator, ClaimLedger, InMemoryTransfer, ValueTransfer
from allowlist.config.runtime import RuntimeConfig, get_default_config
from allowlist.events import EventRecorder
from allowlist.registry import RootRegistry
from api.errors import MissingIdentityError

logger = logging.getLogger(__name__)


def load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a config file, then overlay environment variables.

    Search order for config file:
      1. ./allowlist.yaml
      2. ./.allowlist.yaml
      3. ~/.config/allowlist/config.yaml

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by allowlist.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "allowlist.yaml",
        Path.cwd() / ".allowlist.yaml",
        Path.home() / ".config" / "allowlist" / "config.yaml",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            config = RuntimeConfig.from_yaml(path)
            logger.info(f"Loaded config from {path}")
            break

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


class AllowlistService:
    """
    Owns one allowlist instance: registry, ledger, transfer collaborator and events.

    Without a config it uses the process default from get_default_config.

    Usage:
        service = AllowlistService(config)
        with service.transaction():
            service.coordinator.claim(...)
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        transfer: Optional[ValueTransfer] = None,
    ) -> None:
        self.config = config or get_default_config()
        self.events = EventRecorder()
        self.registry = RootRegistry(events=self.events)
        self.ledger = ClaimLedger()

        if transfer is None:
            pool = InMemoryTransfer()
            for token, amount in self.config.claims.pool_balances.items():
                pool.fund(self.config.claims.custodial_pool, amount, token)
            transfer = pool
        self.transfer = transfer

        self.coordinator = ClaimCoordinator.from_config(
            self.config,
            registry=self.registry,
            ledger=self.ledger,
            transfer=self.transfer,
            events=self.events,
        )
        self._lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Iterator["AllowlistService"]:
        """Run a block in isolation from every other request."""
        with self._lock:
            yield self


_service: Optional[AllowlistService] = None
_service_lock = threading.Lock()


def get_service() -> AllowlistService:
    """FastAPI dependency: the process-wide AllowlistService."""
    global _service
    with _service_lock:
        if _service is None:
            _service = AllowlistService(load_runtime_config())
        return _service


def set_service(service: Optional[AllowlistService]) -> None:
    """Replace (or with None, reset) the process-wide service."""
    global _service
    with _service_lock:
        _service = service


def get_caller_identity(
    x_caller_identity: Optional[str] = Header(default=None),
) -> str:
    """
    FastAPI dependency: authenticated caller identity.

    The host's authentication layer is expected to set X-Caller-Identity
    after verifying the caller; this service trusts it as-is.
    """
    if not x_caller_identity:
        raise MissingIdentityError()
    return x_caller_identity
