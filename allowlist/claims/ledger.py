"""
Claim Ledger

Tracks which (version, beneficiary) pairs have redeemed.

Invariants:
- a pair is inserted at most once
- has_claimed / mark_claimed are O(1) dict operations keyed by the pair
- check-and-set happens in one call; there is no separate "check" window
  between observing "not claimed" and inserting

Records for superseded versions stay in the ledger (dormant). They can no
longer match a new claim because claims always key on the current version.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional

from allowlist.schemas.errors import AlreadyClaimedException


logger = logging.getLogger(__name__)

ClaimKey = tuple[int, str]


@dataclass
class ClaimRecord:
    """One redeemed (version, beneficiary) pair."""
    version: int
    beneficiary: str
    amount: Optional[str] = None
    token: Optional[str] = None
    claimed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    transfer_ref: Optional[str] = None

    @property
    def key(self) -> ClaimKey:
        return (self.version, self.beneficiary)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "beneficiary": self.beneficiary,
            "amount": self.amount,
            "token": self.token,
            "claimed_at": self.claimed_at.isoformat(),
            "transfer_ref": self.transfer_ref,
        }


class ClaimLedger:
    """
    Exactly-once claim registry.

    Usage:
        ledger = ClaimLedger()
        with ledger.reserve(version, "alice") as record:
            record.transfer_ref = transfer(...)   # rollback if this raises
        ledger.has_claimed(version, "alice")      # True
    """

    def __init__(self) -> None:
        self._records: dict[ClaimKey, ClaimRecord] = {}

    def has_claimed(self, version: int, beneficiary: str) -> bool:
        """Whether the pair has already redeemed."""
        return (version, beneficiary) in self._records

    def mark_claimed(
        self,
        version: int,
        beneficiary: str,
        *,
        amount: Optional[str] = None,
        token: Optional[str] = None,
    ) -> ClaimRecord:
        """
        Insert the pair.

        Raises:
            AlreadyClaimedException: If the pair is already present
        """
        key = (version, beneficiary)
        if key in self._records:
            raise AlreadyClaimedException(beneficiary=beneficiary, version=version)
        record = ClaimRecord(
            version=version,
            beneficiary=beneficiary,
            amount=amount,
            token=token,
        )
        self._records[key] = record
        return record

    @contextmanager
    def reserve(
        self,
        version: int,
        beneficiary: str,
        *,
        amount: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Iterator[ClaimRecord]:
        """
        Mark the pair for the duration of a block, removing it if the block raises.

        This gives callers all-or-nothing semantics around a side effect
        such as a value transfer.

        Raises:
            AlreadyClaimedException: If the pair is already present
        """
        record = self.mark_claimed(version, beneficiary, amount=amount, token=token)
        try:
            yield record
        except BaseException:
            # Only remove our own record
            if self._records.get(record.key) is record:
                del self._records[record.key]
            logger.error(f"Rolled back claim v{version} {beneficiary!r}")
            raise

    def get_record(self, version: int, beneficiary: str) -> Optional[ClaimRecord]:
        return self._records.get((version, beneficiary))

    def records_for_version(self, version: int) -> list[ClaimRecord]:
        return [r for r in self._records.values() if r.version == version]

    def prune(self, before_version: int) -> int:
        """
        Drop dormant records for versions older than before_version.

        Optional housekeeping; never needed for correctness.

        Returns:
            Number of records removed
        """
        stale = [key for key in self._records if key[0] < before_version]
        for key in stale:
            del self._records[key]
        if stale:
            logger.info(f"Pruned {len(stale)} claim records older than v{before_version}")
        return len(stale)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records
