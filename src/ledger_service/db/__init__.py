from .models import Account, Base, Transaction

__all__ = ["Account", "Base", "Transaction"]
