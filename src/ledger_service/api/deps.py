from starlette.requests import Request

from ..config import Settings
from ..ledger.base import LedgerStore


def get_store(request: Request) -> LedgerStore:
    """
    Ledger store dependency for FastAPI routes; attached to app.state at startup.
    """
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
