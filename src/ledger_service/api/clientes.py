import asyncio
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends

from ..config import Settings
from ..errors import AccountNotFound, InfrastructureError
from ..ledger.base import Direction, LedgerStore
from ..logging_config import get_logger
from .deps import get_settings, get_store
from .schemas import BalanceOut, ErrorOut, ExtractOut, TransactionIn
from .serializers import serialize_balance, serialize_extract

logger = get_logger("ledger_service.api.clientes")

router = APIRouter(tags=["clientes"])

T = TypeVar("T")

_ERROR_RESPONSES = {
    400: {"model": ErrorOut},
    404: {"model": ErrorOut},
    500: {"model": ErrorOut},
}


def _ensure_known_account(account_id: int, settings: Settings) -> None:
    if not settings.is_known_account_id(account_id):
        logger.warning("Account id out of range account_id=%s", account_id)
        raise AccountNotFound(account_id)


async def _with_deadline(call: Awaitable[T], timeout: float) -> T:
    """
    Await a store call under the request deadline. The call is cancelled (and
    its unit of work rolled back) when the deadline passes.
    """
    if not timeout:
        return await call
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("Store call exceeded %ss deadline", timeout)
        raise InfrastructureError(f"store call exceeded {timeout}s deadline") from e


@router.get("/clientes/{account_id}/extrato", response_model=ExtractOut, responses=_ERROR_RESPONSES)
async def get_extract(
    account_id: int,
    store: LedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Current balance plus the ten most recent transactions, newest first.
    """
    _ensure_known_account(account_id, settings)
    extract = await _with_deadline(store.read_extract(account_id), settings.request_timeout)
    return serialize_extract(extract)


@router.post(
    "/clientes/{account_id}/transacoes",
    response_model=BalanceOut,
    responses={**_ERROR_RESPONSES, 422: {"model": ErrorOut}},
)
async def create_transaction(
    account_id: int,
    payload: TransactionIn,
    store: LedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Apply a credit ("c") or debit ("d") to the account and return the new balance.
    """
    _ensure_known_account(account_id, settings)
    logger.info(
        "Transaction request account_id=%s tipo=%s valor=%s",
        account_id,
        payload.tipo,
        payload.valor,
    )
    balance = await _with_deadline(
        store.apply_transaction(account_id, payload.valor, Direction(payload.tipo), payload.descricao),
        settings.request_timeout,
    )
    return serialize_balance(balance)
