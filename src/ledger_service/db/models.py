# ledger_service/db/models.py
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("saldo >= -limite", name="ck_accounts_saldo_within_limite"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    # Column names kept from the deployed schema
    balance: Mapped[int] = mapped_column("saldo", BigInteger, nullable=False, default=0)
    limit: Mapped[int] = mapped_column("limite", BigInteger, nullable=False)


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_account_id_realizada_em", "account_id", "realizada_em"),)

    # Integer (not BigInteger) so SQLite maps it onto the rowid
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[int] = mapped_column("valor", Integer, nullable=False)
    direction: Mapped[str] = mapped_column("tipo", String(1), nullable=False)
    description: Mapped[str] = mapped_column("descricao", String(10), nullable=False)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        "realizada_em",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
    )


def insertion_timestamp(dialect_name: str):
    """
    SQL expression for realizada_em at insert time. On PostgreSQL this is the
    wall clock at write (clock_timestamp()), not the transaction start time.
    """
    if dialect_name == "postgresql":
        return func.clock_timestamp()
    return func.current_timestamp()
