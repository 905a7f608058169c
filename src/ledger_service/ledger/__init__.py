from .base import EXTRACT_SIZE, Balance, Direction, Extract, LedgerStore, TransactionRecord
from .memory_store import InMemoryLedgerStore
from .sql_store import SqlLedgerStore

__all__ = [
    "EXTRACT_SIZE",
    "Balance",
    "Direction",
    "Extract",
    "InMemoryLedgerStore",
    "LedgerStore",
    "SqlLedgerStore",
    "TransactionRecord",
]
