"""InMemoryLedgerStore: same contract as the SQL backend."""

from __future__ import annotations

import asyncio

import pytest

from ledger_service.errors import AccountNotFound, BalanceCeilingExceeded, InsufficientFunds
from ledger_service.ledger.base import EXTRACT_SIZE, MAX_BALANCE, Balance, Direction
from ledger_service.ledger.memory_store import InMemoryLedgerStore


def _store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore({1: (0, 1000), 2: (0, 500)})


def test_worked_example() -> None:
    store = _store()

    async def scenario():
        assert await store.apply_transaction(1, 500, Direction.DEBIT, "aluguel") == Balance(-500, 1000)
        with pytest.raises(InsufficientFunds):
            await store.apply_transaction(1, 600, Direction.DEBIT, "carro")
        assert await store.apply_transaction(1, 100, Direction.CREDIT, "pix") == Balance(-400, 1000)
        return await store.read_extract(1)

    extract = asyncio.run(scenario())

    assert extract.balance == -400
    assert [(t.value, t.direction.value, t.description) for t in extract.transactions] == [
        (100, "c", "pix"),
        (500, "d", "aluguel"),
    ]


def test_refused_debit_records_nothing() -> None:
    store = _store()

    async def scenario():
        with pytest.raises(InsufficientFunds):
            await store.apply_transaction(2, 501, Direction.DEBIT, "too much")
        return await store.read_extract(2)

    extract = asyncio.run(scenario())

    assert extract.balance == 0
    assert extract.transactions == []


def test_extract_is_capped_and_newest_first() -> None:
    store = _store()

    async def scenario():
        for i in range(1, 16):
            await store.apply_transaction(1, i, Direction.CREDIT, f"t{i}")
        return await store.read_extract(1)

    extract = asyncio.run(scenario())

    assert len(extract.transactions) == EXTRACT_SIZE
    assert [t.value for t in extract.transactions] == list(range(15, 5, -1))


def test_concurrent_debits_only_affordable_ones_succeed() -> None:
    store = _store()

    async def scenario():
        return await asyncio.gather(
            *(store.apply_transaction(2, 100, Direction.DEBIT, f"d{i}") for i in range(8)),
            return_exceptions=True,
        )

    results = asyncio.run(scenario())

    assert sum(isinstance(r, Balance) for r in results) == 5
    assert sum(isinstance(r, InsufficientFunds) for r in results) == 3


def test_unknown_account() -> None:
    store = _store()

    with pytest.raises(AccountNotFound):
        asyncio.run(store.apply_transaction(9, 1, Direction.CREDIT, "x"))
    with pytest.raises(AccountNotFound):
        asyncio.run(store.read_extract(9))


def test_seed_must_respect_limit() -> None:
    with pytest.raises(ValueError):
        InMemoryLedgerStore({1: (-10, 5)})
    with pytest.raises(ValueError):
        InMemoryLedgerStore({1: (0, MAX_BALANCE + 1)})


def test_credit_past_the_balance_ceiling_is_refused() -> None:
    store = InMemoryLedgerStore({1: (0, 100)}, max_balance=300)

    async def scenario():
        assert await store.apply_transaction(1, 300, Direction.CREDIT, "a") == Balance(300, 100)
        with pytest.raises(BalanceCeilingExceeded):
            await store.apply_transaction(1, 1, Direction.CREDIT, "b")
        return await store.read_extract(1)

    extract = asyncio.run(scenario())

    assert extract.balance == 300
    assert [t.description for t in extract.transactions] == ["a"]
