"""
ledger_service/config.py

Process-wide settings for the ledger service.

Values come from the environment (optionally seeded from a .env file) and are
read once at startup into an immutable Settings object that is handed to the
app factory.
"""

from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "postgresql+asyncpg://postgres:postgres@db:5432/postgres"

STORE_SQL = "sql"
STORE_MEMORY = "memory"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    database_url: str = Field(DEFAULT_DATABASE_URL, validation_alias="DATABASE_URL")
    store_backend: str = Field(STORE_SQL, validation_alias="LEDGER_STORE")
    pool_min_conns: int = Field(5, validation_alias="DB_POOL_MIN_CONNS")
    pool_max_conns: int = Field(75, validation_alias="DB_POOL_MAX_CONNS")
    db_echo: bool = Field(False, validation_alias="DB_ECHO")
    connect_retry_interval: float = Field(2.0, validation_alias="DB_CONNECT_RETRY_INTERVAL")
    # 0 means poll until the database answers
    connect_max_attempts: int = Field(0, validation_alias="DB_CONNECT_MAX_ATTEMPTS")
    create_schema: bool = Field(False, validation_alias="LEDGER_CREATE_SCHEMA")
    min_account_id: int = Field(1, validation_alias="LEDGER_MIN_ACCOUNT_ID")
    max_account_id: int = Field(5, validation_alias="LEDGER_MAX_ACCOUNT_ID")
    # Seconds; 0 disables the per-request deadline
    request_timeout: float = Field(5.0, validation_alias="LEDGER_REQUEST_TIMEOUT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(Path("logs"), validation_alias="LOG_DIR")
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")

    @field_validator("store_backend", mode="before")
    @classmethod
    def _normalize_store(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.store_backend not in (STORE_SQL, STORE_MEMORY):
            raise ValueError(
                f"LEDGER_STORE must be {STORE_SQL!r} or {STORE_MEMORY!r}, got {self.store_backend!r}"
            )
        if self.pool_min_conns < 1:
            raise ValueError("DB_POOL_MIN_CONNS must be at least 1")
        if self.pool_max_conns < self.pool_min_conns:
            raise ValueError("DB_POOL_MAX_CONNS must be >= DB_POOL_MIN_CONNS")
        if self.connect_retry_interval < 0:
            raise ValueError("DB_CONNECT_RETRY_INTERVAL must not be negative")
        if self.connect_max_attempts < 0:
            raise ValueError("DB_CONNECT_MAX_ATTEMPTS must not be negative")
        if self.min_account_id > self.max_account_id:
            raise ValueError("LEDGER_MIN_ACCOUNT_ID must be <= LEDGER_MAX_ACCOUNT_ID")
        if self.request_timeout < 0:
            raise ValueError("LEDGER_REQUEST_TIMEOUT must not be negative")
        return self

    @property
    def pool_overflow(self) -> int:
        return self.pool_max_conns - self.pool_min_conns

    def is_known_account_id(self, account_id: int) -> bool:
        return self.min_account_id <= account_id <= self.max_account_id

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        When ``env`` is not given, a .env file (if any) is loaded first without
        overriding variables that are already set. A given mapping is used
        instead of the process environment; empty values fall back to defaults.
        """
        if env is None:
            load_dotenv(find_dotenv(usecwd=True), override=False)
            return cls()
        return cls.model_validate({k: v for k, v in env.items() if v.strip()})
