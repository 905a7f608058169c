"""Settings parsing and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from ledger_service.config import DEFAULT_DATABASE_URL, STORE_MEMORY, STORE_SQL, Settings


def test_defaults() -> None:
    s = Settings.from_env({})

    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.store_backend == STORE_SQL
    assert (s.pool_min_conns, s.pool_max_conns, s.pool_overflow) == (5, 75, 70)
    assert s.connect_retry_interval == 2.0
    assert s.connect_max_attempts == 0
    assert (s.min_account_id, s.max_account_id) == (1, 5)
    assert s.create_schema is False
    assert s.log_dir == Path("logs")


def test_values_are_read_from_environment() -> None:
    s = Settings.from_env(
        {
            "DATABASE_URL": "sqlite+aiosqlite:///x.db",
            "LEDGER_STORE": "Memory",
            "DB_POOL_MIN_CONNS": "2",
            "DB_POOL_MAX_CONNS": "10",
            "DB_CONNECT_MAX_ATTEMPTS": "4",
            "LEDGER_CREATE_SCHEMA": "yes",
            "LEDGER_MAX_ACCOUNT_ID": "9",
            "LEDGER_REQUEST_TIMEOUT": "0.5",
            "LOG_LEVEL": "debug",
            "PORT": "9999",
        }
    )

    assert s.database_url == "sqlite+aiosqlite:///x.db"
    assert s.store_backend == STORE_MEMORY
    assert s.pool_overflow == 8
    assert s.connect_max_attempts == 4
    assert s.create_schema is True
    assert s.is_known_account_id(9)
    assert not s.is_known_account_id(10)
    assert s.request_timeout == 0.5
    assert s.log_level == "DEBUG"
    assert s.port == 9999


@pytest.mark.parametrize(
    "env",
    [
        {"LEDGER_STORE": "redis"},
        {"DB_POOL_MIN_CONNS": "ten"},
        {"DB_POOL_MIN_CONNS": "10", "DB_POOL_MAX_CONNS": "5"},
        {"DB_ECHO": "maybe"},
        {"LEDGER_MIN_ACCOUNT_ID": "6"},
        {"LEDGER_REQUEST_TIMEOUT": "-1"},
    ],
)
def test_invalid_values_fail_fast(env: dict) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(env)


def test_process_environment_is_read_when_no_mapping_is_given(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LEDGER_STORE", "memory")
    monkeypatch.setenv("DB_POOL_MAX_CONNS", "9")
    monkeypatch.setenv("PORT", "")

    s = Settings.from_env()

    assert s.store_backend == STORE_MEMORY
    assert s.pool_max_conns == 9
    assert s.port == 8080


def test_settings_are_immutable() -> None:
    s = Settings.from_env({})

    with pytest.raises(ValueError):
        s.port = 1
