from typing import List, Literal

from pydantic import BaseModel, Field, StrictInt

from ..ledger.base import MAX_VALUE


class TransactionIn(BaseModel):
    valor: StrictInt = Field(..., gt=0, le=MAX_VALUE)
    tipo: Literal["c", "d"]
    descricao: str = Field(..., min_length=1, max_length=10)


class BalanceOut(BaseModel):
    saldo: int
    limite: int


class ExtractBalanceOut(BaseModel):
    total: int
    limite: int
    data_extrato: str


class ExtractTransactionOut(BaseModel):
    valor: int
    tipo: str
    descricao: str
    realizada_em: str


class ExtractOut(BaseModel):
    saldo: ExtractBalanceOut
    ultimas_transacoes: List[ExtractTransactionOut]


class ErrorOut(BaseModel):
    message: str
