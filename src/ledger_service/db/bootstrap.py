"""
Schema creation and account provisioning helpers.

Accounts are normally provisioned outside the service; these helpers exist for
local runs, tests and LEDGER_CREATE_SCHEMA=true deployments.
"""

from typing import Dict, Mapping, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from ..ledger.base import MAX_BALANCE
from ..logging_config import get_logger
from .models import Account, Base
from .session import make_sessionmaker

logger = get_logger("ledger_service.db.bootstrap")

# account id -> (initial balance, credit limit)
DEFAULT_ACCOUNTS: Dict[int, Tuple[int, int]] = {
    1: (0, 100000),
    2: (0, 80000),
    3: (0, 1000000),
    4: (0, 10000000),
    5: (0, 500000),
}


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ensured (tables=%s)", sorted(Base.metadata.tables))


async def seed_accounts(engine: AsyncEngine, accounts: Mapping[int, Tuple[int, int]] = DEFAULT_ACCOUNTS) -> int:
    """
    Insert any missing accounts. Existing rows are left untouched.
    Returns the number of accounts created.
    """
    created = 0
    session_factory = make_sessionmaker(engine)
    async with session_factory() as session, session.begin():
        res = await session.execute(select(Account.id).where(Account.id.in_(list(accounts))))
        existing = set(res.scalars().all())
        for account_id, (balance, limit) in accounts.items():
            if account_id in existing:
                continue
            if limit < 0 or limit > MAX_BALANCE or not -limit <= balance <= MAX_BALANCE:
                raise ValueError(f"account {account_id}: balance {balance} violates limit {limit}")
            session.add(Account(id=account_id, balance=balance, limit=limit))
            created += 1
    logger.info("Account seed complete; created=%s", created)
    return created
