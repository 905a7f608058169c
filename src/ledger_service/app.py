"""
ledger_service/app.py

FastAPI application entrypoint for the ledger service.

This module wires together:
- Logging configuration (file-based under LOG_DIR)
- Request logging middleware and error-to-status mapping
- Store lifecycle: engine creation, readiness polling, optional schema
  bootstrap on startup, and disposal on shutdown
- The /clientes router
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from .api.clientes import router as clientes_router
from .config import STORE_MEMORY, Settings
from .db.bootstrap import DEFAULT_ACCOUNTS, create_schema, seed_accounts
from .db.session import create_engine_from_settings, wait_for_database
from .errors import InfrastructureError, LedgerError, ValidationError
from .ledger.base import LedgerStore
from .ledger.memory_store import InMemoryLedgerStore
from .ledger.sql_store import SqlLedgerStore
from .logging_config import get_logger, setup_logging

logger = get_logger("ledger_service")


async def build_store(settings: Settings) -> LedgerStore:
    """
    Create the configured store. For the SQL backend this blocks until the
    database answers (or the bounded retry budget runs out).
    """
    if settings.store_backend == STORE_MEMORY:
        logger.info("Using in-memory ledger store")
        return InMemoryLedgerStore(DEFAULT_ACCOUNTS)

    engine = create_engine_from_settings(settings)
    try:
        await wait_for_database(
            engine,
            retry_interval=settings.connect_retry_interval,
            max_attempts=settings.connect_max_attempts,
        )
        if settings.create_schema:
            await create_schema(engine)
            await seed_accounts(engine)
    except BaseException:
        await engine.dispose()
        raise
    return SqlLedgerStore(engine)


def _error_response(exc: LedgerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def create_app(settings: Optional[Settings] = None, store: Optional[LedgerStore] = None) -> FastAPI:
    """
    Build the application. An injected store is used as-is and not closed on
    shutdown; otherwise one is built from settings on startup.
    """
    settings = settings or Settings.from_env()

    # Configure logging before creating the app
    setup_logging(settings.log_level, settings.log_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Ledger service starting up (store=%s)", settings.store_backend)
        owned = store is None
        app.state.store = await build_store(settings) if owned else store
        try:
            yield
        finally:
            if owned:
                try:
                    await app.state.store.close()
                except Exception:
                    logger.exception("Error closing ledger store on shutdown")
            logger.info("Ledger service shutting down")

    app = FastAPI(title="Ledger Service", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Lightweight request logger to help trace ledger traffic.
        """
        try:
            body = await request.body()
            logger.info(
                "HTTP %s %s from %s body=%s",
                request.method,
                request.url.path,
                request.client.host if request.client else "?",
                body.decode(errors="ignore")[:200],
            )
        except Exception:
            logger.exception("Failed to read request body for logging")
        response = await call_next(request)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        return _error_response(ValidationError(str(exc.errors())))

    @app.exception_handler(LedgerError)
    async def ledger_exception_handler(request: Request, exc: LedgerError):
        if exc.status_code >= 500:
            logger.error("Request failed %s %s: %s", request.method, request.url.path, exc.detail)
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(InfrastructureError())

    @app.get("/api/health")
    async def health():
        """
        Simple health check endpoint.
        """
        return {"status": "healthy"}

    app.include_router(clientes_router)
    return app


def main() -> None:
    settings = Settings.from_env()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
