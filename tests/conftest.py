"""Shared fixtures for the ledger service tests.

HTTP tests run against the in-memory store by default so they stay fast and
hermetic; SQL-backed tests build their own file-backed SQLite database under
``tmp_path``. Log files are redirected into ``tmp_path`` as well.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from helpers.db import TEST_ACCOUNTS
from ledger_service.app import create_app
from ledger_service.config import STORE_MEMORY, Settings
from ledger_service.ledger.memory_store import InMemoryLedgerStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(store_backend=STORE_MEMORY, log_dir=tmp_path / "logs", request_timeout=5.0)


@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore(TEST_ACCOUNTS)


@pytest.fixture
def client(settings: Settings, memory_store: InMemoryLedgerStore):
    app = create_app(settings, store=memory_store)
    with TestClient(app) as c:
        yield c
