from datetime import datetime, timezone
from typing import Any, Dict

from ..ledger.base import Balance, Extract, TransactionRecord


def _iso_utc(ts: datetime) -> str:
    # SQLite hands back naive timestamps; they are stored in UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def serialize_balance(b: Balance) -> Dict[str, Any]:
    return {"saldo": b.balance, "limite": b.limit}


def serialize_tx(t: TransactionRecord) -> Dict[str, Any]:
    return {
        "valor": t.value,
        "tipo": t.direction.value,
        "descricao": t.description,
        "realizada_em": _iso_utc(t.created_at),
    }


def serialize_extract(e: Extract) -> Dict[str, Any]:
    return {
        "saldo": {
            "total": e.balance,
            "limite": e.limit,
            "data_extrato": _iso_utc(e.taken_at),
        },
        "ultimas_transacoes": [serialize_tx(t) for t in e.transactions],
    }
