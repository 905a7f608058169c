"""Minimal ledger service: credit/debit transactions and account extracts."""

__version__ = "1.0.0"
