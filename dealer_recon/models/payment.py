"""Payment model for the TT and TG feeds."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from dealer_recon.models.enums import PaymentMethod


@dataclass(frozen=True)
class Payment:
    """Money received against an order."""

    payment_id: int | None
    order_id: int | None
    method: PaymentMethod
    amount: Decimal | None
    customer_id: int | None = None
    payment_date: date | None = None
