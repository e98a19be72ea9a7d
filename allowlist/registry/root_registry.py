"""
Root Registry

Holds the current Merkle root, a monotonic version counter, and the
authority identity. Handles one-time initialization and authority-gated
rotation.

Invariants:
- version starts at 0 and only ever increases by one per rotation
- (root, version) are always read together as one snapshot
- authority is fixed at initialization
- a failed rotation leaves the state untouched
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from allowlist.crypto.hashing import parse_digest, to_hex
from allowlist.events import EventRecorder, RootInitialized, RootRotated
from allowlist.schemas.errors import (
    AlreadyInitializedException,
    NotInitializedException,
    UnauthorizedException,
)


logger = logging.getLogger(__name__)

# Version counter is an unsigned 64-bit integer
MAX_VERSION = 2**64 - 1


class RootSnapshot(NamedTuple):
    """Atomic (root, version) pair."""
    root: bytes
    version: int


@dataclass(frozen=True)
class RootState:
    """
    Root state of one allowlist instance.

    Frozen: rotation replaces the whole object, so a reader holding a
    reference always sees a consistent (root, version, authority) triple.
    """
    merkle_root: bytes
    version: int
    authority: str


@dataclass(frozen=True)
class RootRecord:
    """History entry for one root version."""
    version: int
    root: bytes
    committed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    leaf_count: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "root": to_hex(self.root),
            "committed_at": self.committed_at.isoformat(),
            "leaf_count": self.leaf_count,
        }


class RootRegistry:
    """
    Versioned root registry.

    Usage:
        registry = RootRegistry()
        registry.initialize(root, authority="treasury-admin")
        registry.rotate("treasury-admin", new_root)
        root, version = registry.current()
    """

    def __init__(self, events: Optional[EventRecorder] = None) -> None:
        self._state: Optional[RootState] = None
        self._history: list[RootRecord] = []
        self.events = events

    @classmethod
    def create(
        cls,
        root: bytes | str,
        authority: str,
        *,
        leaf_count: Optional[int] = None,
        events: Optional[EventRecorder] = None,
    ) -> "RootRegistry":
        """Construct and initialize a registry in one step."""
        registry = cls(events=events)
        registry.initialize(root, authority, leaf_count=leaf_count)
        return registry

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> RootState:
        """
        Current RootState.

        Raises:
            NotInitializedException: If initialize() has not been called
        """
        state = self._state
        if state is None:
            raise NotInitializedException()
        return state

    @property
    def authority(self) -> str:
        return self.state.authority

    def initialize(
        self,
        root: bytes | str,
        authority: str,
        *,
        leaf_count: Optional[int] = None,
    ) -> RootSnapshot:
        """
        Set the initial root with version 0.

        Raises:
            AlreadyInitializedException: If called more than once
            ValueError: If root is not a 32-byte digest or authority is empty
        """
        if self._state is not None:
            raise AlreadyInitializedException(
                details={"version": self._state.version},
            )
        if not authority:
            raise ValueError("Authority identity must not be empty")

        digest = parse_digest(root)
        self._state = RootState(merkle_root=digest, version=0, authority=authority)
        self._history.append(RootRecord(version=0, root=digest, leaf_count=leaf_count))

        logger.info(f"Registry initialized at v0 root={to_hex(digest)} authority={authority}")
        if self.events is not None:
            self.events.emit(
                RootInitialized(version=0, root=to_hex(digest), authority=authority)
            )
        return RootSnapshot(digest, 0)

    def rotate(
        self,
        caller: str,
        new_root: bytes | str,
        *,
        leaf_count: Optional[int] = None,
    ) -> RootSnapshot:
        """
        Replace the root and advance the version.

        Raises:
            NotInitializedException: If the registry has no root yet
            UnauthorizedException: If caller is not the authority
            ValueError: If new_root is not a 32-byte digest
        """
        state = self.state
        if caller != state.authority:
            logger.warning(f"Rejected rotation by non-authority {caller!r}")
            raise UnauthorizedException(
                "Only the authority may rotate the root",
                caller=caller,
            )
        if state.version >= MAX_VERSION:
            raise OverflowError("Root version counter exhausted")

        digest = parse_digest(new_root)
        new_state = RootState(
            merkle_root=digest,
            version=state.version + 1,
            authority=state.authority,
        )
        self._state = new_state
        self._history.append(
            RootRecord(version=new_state.version, root=digest, leaf_count=leaf_count)
        )

        logger.info(
            f"Root rotated v{state.version} -> v{new_state.version} root={to_hex(digest)}"
        )
        if self.events is not None:
            self.events.emit(
                RootRotated(
                    version=new_state.version,
                    root=to_hex(digest),
                    previous_root=to_hex(state.merkle_root),
                    leaf_count=leaf_count,
                )
            )
        return RootSnapshot(digest, new_state.version)

    def current(self) -> RootSnapshot:
        """
        Read-only (root, version) snapshot.

        Raises:
            NotInitializedException: If the registry has no root yet
        """
        state = self.state
        return RootSnapshot(state.merkle_root, state.version)

    def history(self) -> list[RootRecord]:
        """All root records, oldest first."""
        return list(self._history)

    def root_at(self, version: int) -> Optional[RootRecord]:
        """Root record for a past or current version, or None if unknown."""
        if 0 <= version < len(self._history):
            return self._history[version]
        return None
