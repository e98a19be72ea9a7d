"""
Value Transfer

Interface to the external value-transfer collaborator, plus an in-memory
custodial-pool implementation used by the bundled API host and by tests.

A collaborator moves a typed balance from a source account (the custodial
pool) to a recipient and either succeeds with a reference string or raises
a TransferError subclass. It must not partially apply a transfer.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional


logger = logging.getLogger(__name__)

# Token key used for the single implied asset of the binary scheme
NATIVE_TOKEN = "native"


class TransferError(Exception):
    """Base error raised by value-transfer collaborators."""

    reason: str = "TRANSFER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InsufficientFundsError(TransferError):
    """The source account cannot cover the amount."""

    reason = "INSUFFICIENT_FUNDS"


class TransferDeniedError(TransferError):
    """The transfer was refused (frozen account, policy, etc.)."""

    reason = "TRANSFER_DENIED"


class ValueTransfer(ABC):
    """Abstract value-transfer collaborator."""

    @abstractmethod
    def transfer(
        self,
        source: str,
        recipient: str,
        amount: Decimal,
        token: Optional[str] = None,
    ) -> str:
        """
        Move amount of token from source to recipient.

        Returns:
            Opaque transfer reference

        Raises:
            InsufficientFundsError: If source cannot cover amount
            TransferDeniedError: If the transfer is refused
        """


class InMemoryTransfer(ValueTransfer):
    """
    Balances held in a dict keyed by (account, token).

    Usage:
        transfers = InMemoryTransfer()
        transfers.fund("custodial-pool", 1_000)
        transfers.transfer("custodial-pool", "alice", Decimal(100))
        transfers.balance_of("alice")   # Decimal("100")
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], Decimal] = {}
        self._denied: set[str] = set()

    def fund(self, account: str, amount: Decimal | int | str, token: Optional[str] = None) -> Decimal:
        """Credit an account; returns the new balance."""
        key = (account, token or NATIVE_TOKEN)
        self._balances[key] = self._balances.get(key, Decimal(0)) + Decimal(amount)
        return self._balances[key]

    def balance_of(self, account: str, token: Optional[str] = None) -> Decimal:
        return self._balances.get((account, token or NATIVE_TOKEN), Decimal(0))

    def deny(self, account: str) -> None:
        """Refuse any transfer to or from account."""
        self._denied.add(account)

    def allow(self, account: str) -> None:
        self._denied.discard(account)

    def transfer(
        self,
        source: str,
        recipient: str,
        amount: Decimal,
        token: Optional[str] = None,
    ) -> str:
        token_key = token or NATIVE_TOKEN
        amount = Decimal(amount)

        if source in self._denied or recipient in self._denied:
            raise TransferDeniedError(f"Transfer from {source} to {recipient} denied")
        if amount < 0:
            raise TransferDeniedError(f"Negative transfer amount {amount}")

        available = self.balance_of(source, token_key)
        if available < amount:
            raise InsufficientFundsError(
                f"{source} holds {available} {token_key}, needs {amount}"
            )

        self._balances[(source, token_key)] = available - amount
        self._balances[(recipient, token_key)] = self.balance_of(recipient, token_key) + amount

        ref = f"tx_{uuid.uuid4().hex[:16]}"
        logger.debug(f"Transferred {amount} {token_key} {source} -> {recipient} ({ref})")
        return ref
