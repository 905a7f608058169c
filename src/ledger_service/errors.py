"""
Error taxonomy shared by the ledger store and the HTTP layer.

Each error carries the HTTP status and the client-facing message it maps to,
so handlers translate outcomes without inspecting error details.
"""

from typing import Optional


class LedgerError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class ValidationError(LedgerError):
    """Malformed or out-of-shape input. Never reaches the store."""

    status_code = 400
    message = "Invalid inputs. Please check your inputs"


class AccountNotFound(LedgerError):
    status_code = 404
    message = "Account not found"

    def __init__(self, account_id: int) -> None:
        super().__init__(f"account {account_id} not found")
        self.account_id = account_id


class InsufficientFunds(LedgerError):
    """The transaction would push the balance below -limit."""

    status_code = 422
    message = "Saldo insuficiente"

    def __init__(self, account_id: int, value: int) -> None:
        super().__init__(f"account {account_id} cannot afford {value}")
        self.account_id = account_id
        self.value = value


class BalanceCeilingExceeded(LedgerError):
    """The credit would push the balance above the storable maximum."""

    status_code = 422
    message = "Saldo excede o maximo permitido"

    def __init__(self, account_id: int, value: int) -> None:
        super().__init__(f"account {account_id} cannot receive {value}")
        self.account_id = account_id
        self.value = value


class InfrastructureError(LedgerError):
    """Store unreachable, commit failure or deadline overrun."""

    status_code = 500
    message = "Internal Server Error"
