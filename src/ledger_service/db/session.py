"""
Async engine construction and the startup readiness loop.
"""

import asyncio
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import Settings
from ..errors import InfrastructureError
from ..logging_config import get_logger

logger = get_logger("ledger_service.db.session")


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the shared async engine. Pool sizing applies to server databases only;
    SQLite picks its own pool class.
    """
    url = make_url(settings.database_url)
    kwargs: Dict[str, Any] = {"echo": settings.db_echo}
    if url.get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=settings.pool_min_conns,
            max_overflow=settings.pool_overflow,
            pool_pre_ping=True,
        )
    logger.info(
        "Creating engine for %s (pool_min=%s pool_max=%s)",
        url.render_as_string(hide_password=True),
        settings.pool_min_conns,
        settings.pool_max_conns,
    )
    return create_async_engine(url, **kwargs)


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def wait_for_database(engine: AsyncEngine, *, retry_interval: float = 2.0, max_attempts: int = 0) -> int:
    """
    Poll the database with SELECT 1 until it answers.

    max_attempts=0 polls forever. Returns the number of attempts used; raises
    InfrastructureError once a bounded number of attempts is exhausted.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.warning("Database connection error (attempt %s): %s", attempt, e)
            if max_attempts and attempt >= max_attempts:
                raise InfrastructureError(f"database unreachable after {attempt} attempts") from e
            logger.info("Retrying in %s seconds", retry_interval)
            await asyncio.sleep(retry_interval)
            continue
        logger.info("Database connected after %s attempt(s)", attempt)
        return attempt
