"""
SQLAlchemy-backed ledger store.

The credit check and the balance update are one conditional UPDATE ... RETURNING
statement, so concurrent requests against the same account serialize on the row
lock held by the database and never act on a stale balance. The transaction
row is inserted in the same unit of work; either both are committed or neither.
"""

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from ..db.models import Account, Transaction, insertion_timestamp
from ..db.session import make_sessionmaker
from ..errors import AccountNotFound, BalanceCeilingExceeded, InfrastructureError, InsufficientFunds
from ..logging_config import get_logger
from .base import EXTRACT_SIZE, MAX_BALANCE, Balance, Direction, Extract, LedgerStore, TransactionRecord, utcnow

logger = get_logger("ledger_service.ledger.sql")


class SqlLedgerStore(LedgerStore):
    def __init__(self, engine: AsyncEngine, extract_size: int = EXTRACT_SIZE, max_balance: int = MAX_BALANCE) -> None:
        self.engine = engine
        self.extract_size = extract_size
        self.max_balance = max_balance
        self._sessions = make_sessionmaker(engine)

    async def apply_transaction(
        self,
        account_id: int,
        value: int,
        direction: Direction,
        description: str,
    ) -> Balance:
        delta = direction.signed(value)
        try:
            async with self._sessions() as session, session.begin():
                stmt = (
                    update(Account)
                    .where(Account.id == account_id)
                    .where(Account.balance + delta >= -Account.limit)
                    .where(Account.balance + delta <= self.max_balance)
                    .values(balance=Account.balance + delta)
                    .returning(Account.balance, Account.limit)
                    .execution_options(synchronize_session=False)
                )
                row = (await session.execute(stmt)).first()
                if row is None:
                    # Nothing updated: unknown account, refused debit or refused credit
                    exists = await session.scalar(select(Account.id).where(Account.id == account_id))
                    if exists is None:
                        logger.warning("Transaction refused, unknown account_id=%s", account_id)
                        raise AccountNotFound(account_id)
                    if direction is Direction.CREDIT:
                        logger.warning(
                            "Transaction refused, balance ceiling account_id=%s valor=%s",
                            account_id,
                            value,
                        )
                        raise BalanceCeilingExceeded(account_id, value)
                    logger.warning(
                        "Transaction refused, insufficient funds account_id=%s tipo=%s valor=%s",
                        account_id,
                        direction.value,
                        value,
                    )
                    raise InsufficientFunds(account_id, value)

                session.add(
                    Transaction(
                        account_id=account_id,
                        value=value,
                        direction=direction.value,
                        description=description,
                        created_at=insertion_timestamp(self.engine.dialect.name),
                    )
                )
                new_balance, limit = row
        except SQLAlchemyError as e:
            logger.exception("Transaction failed (DB error) account_id=%s: %s", account_id, e)
            raise InfrastructureError("database error while applying transaction") from e

        logger.info(
            "Transaction applied account_id=%s tipo=%s valor=%s saldo=%s",
            account_id,
            direction.value,
            value,
            new_balance,
        )
        return Balance(balance=new_balance, limit=limit)

    async def read_extract(self, account_id: int) -> Extract:
        try:
            async with self._sessions() as session:
                res = await session.execute(
                    select(Account.balance, Account.limit).where(Account.id == account_id)
                )
                account = res.first()
                if account is None:
                    logger.warning("Extract requested for unknown account_id=%s", account_id)
                    raise AccountNotFound(account_id)
                taken_at = utcnow()

                stmt = (
                    select(Transaction.value, Transaction.direction, Transaction.description, Transaction.created_at)
                    .where(Transaction.account_id == account_id)
                    .order_by(Transaction.created_at.desc(), Transaction.id.desc())
                    .limit(self.extract_size)
                )
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as e:
            logger.exception("Extract failed (DB error) account_id=%s: %s", account_id, e)
            raise InfrastructureError("database error while reading extract") from e

        balance, limit = account
        return Extract(
            balance=balance,
            limit=limit,
            taken_at=taken_at,
            transactions=[
                TransactionRecord(
                    value=value,
                    direction=Direction(tipo),
                    description=description,
                    created_at=created_at,
                )
                for value, tipo, description, created_at in rows
            ],
        )

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Engine disposed")
