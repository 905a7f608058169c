"""
Domain types and the store interface every ledger backend implements.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List

EXTRACT_SIZE = 10

# valor is stored in a 32-bit column
MAX_VALUE = 2**31 - 1
# saldo/limite are 64-bit; keeping |saldo| <= 2**62 leaves room for saldo ± MAX_VALUE
MAX_BALANCE = 2**62


class Direction(str, Enum):
    CREDIT = "c"
    DEBIT = "d"

    def signed(self, value: int) -> int:
        """Return the balance delta for a transaction of ``value`` in this direction."""
        return value if self is Direction.CREDIT else -value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Balance:
    balance: int
    limit: int


@dataclass(frozen=True)
class TransactionRecord:
    value: int
    direction: Direction
    description: str
    created_at: datetime


@dataclass(frozen=True)
class Extract:
    balance: int
    limit: int
    taken_at: datetime
    transactions: List[TransactionRecord] = field(default_factory=list)


class LedgerStore(abc.ABC):
    """
    Storage capability behind the HTTP handlers.

    apply_transaction must check the credit limit and persist the new balance
    together with the transaction row as one atomic conditional update.
    """

    @abc.abstractmethod
    async def apply_transaction(
        self,
        account_id: int,
        value: int,
        direction: Direction,
        description: str,
    ) -> Balance:
        """
        Apply a transaction and return the post-transaction balance.

        Raises AccountNotFound, InsufficientFunds or InfrastructureError; on any
        of them nothing is persisted.
        """

    @abc.abstractmethod
    async def read_extract(self, account_id: int) -> Extract:
        """
        Return the current balance and the EXTRACT_SIZE most recent
        transactions, newest first.
        """

    async def close(self) -> None:
        return None
