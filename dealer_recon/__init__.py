"""Dealer order reconciliation, installment ledger and customer analytics."""

__version__ = "0.1.0"
