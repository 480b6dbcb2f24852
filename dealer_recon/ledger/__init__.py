"""Installment plan ledger."""

from dealer_recon.ledger.installment import (
    InstallmentLedger,
    record_one_month,
    record_payment,
)

__all__ = ["InstallmentLedger", "record_one_month", "record_payment"]
