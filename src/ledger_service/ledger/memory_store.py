"""
Process-local ledger store.

There is no await between the limit check and the mutation, so each
apply_transaction call is atomic with respect to every other coroutine on the
event loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

from ..errors import AccountNotFound, BalanceCeilingExceeded, InsufficientFunds
from ..logging_config import get_logger
from .base import EXTRACT_SIZE, MAX_BALANCE, Balance, Direction, Extract, LedgerStore, TransactionRecord, utcnow

logger = get_logger("ledger_service.ledger.memory")


@dataclass
class _AccountState:
    balance: int
    limit: int
    transactions: List[TransactionRecord] = field(default_factory=list)


class InMemoryLedgerStore(LedgerStore):
    def __init__(
        self,
        accounts: Mapping[int, Tuple[int, int]],
        extract_size: int = EXTRACT_SIZE,
        max_balance: int = MAX_BALANCE,
    ) -> None:
        self.extract_size = extract_size
        self.max_balance = max_balance
        self._accounts: Dict[int, _AccountState] = {}
        for account_id, (balance, limit) in accounts.items():
            if limit < 0 or limit > max_balance or not -limit <= balance <= max_balance:
                raise ValueError(f"account {account_id}: balance {balance} violates limit {limit}")
            self._accounts[account_id] = _AccountState(balance=balance, limit=limit)

    def _get(self, account_id: int) -> _AccountState:
        state = self._accounts.get(account_id)
        if state is None:
            logger.warning("Unknown account_id=%s", account_id)
            raise AccountNotFound(account_id)
        return state

    async def apply_transaction(
        self,
        account_id: int,
        value: int,
        direction: Direction,
        description: str,
    ) -> Balance:
        state = self._get(account_id)
        new_balance = state.balance + direction.signed(value)
        if new_balance < -state.limit:
            logger.warning(
                "Transaction refused, insufficient funds account_id=%s tipo=%s valor=%s",
                account_id,
                direction.value,
                value,
            )
            raise InsufficientFunds(account_id, value)
        if new_balance > self.max_balance:
            logger.warning("Transaction refused, balance ceiling account_id=%s valor=%s", account_id, value)
            raise BalanceCeilingExceeded(account_id, value)

        state.balance = new_balance
        state.transactions.append(
            TransactionRecord(
                value=value,
                direction=direction,
                description=description,
                created_at=utcnow(),
            )
        )
        logger.info(
            "Transaction applied account_id=%s tipo=%s valor=%s saldo=%s",
            account_id,
            direction.value,
            value,
            new_balance,
        )
        return Balance(balance=new_balance, limit=state.limit)

    async def read_extract(self, account_id: int) -> Extract:
        state = self._get(account_id)
        recent = state.transactions[-self.extract_size:]
        return Extract(
            balance=state.balance,
            limit=state.limit,
            taken_at=utcnow(),
            transactions=list(reversed(recent)),
        )
