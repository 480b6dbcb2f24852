"""Order models for the reconciliation core."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from dealer_recon.models.enums import AmountSource, OrderStatus


@dataclass(frozen=True)
class OrderAmountCandidates:
    """Everything on a raw order that might indicate its price."""

    detail_amount: Decimal | None = None  # quantity x unit price
    confirmation_amount: Decimal | None = None  # sale confirmation total
    payment_amount: Decimal | None = None  # embedded payment sub-object
    payment_id: int | None = None


@dataclass(frozen=True)
class NormalizedOrder:
    """Canonical order built from a raw order payload."""

    order_id: int
    customer_id: int
    status: OrderStatus
    status_text: str = ""  # raw status as received
    model_id: int | None = None
    serial_id: str | None = None
    order_date: date | None = None
    dealer_staff_id: int | None = None
    candidates: OrderAmountCandidates = field(default_factory=OrderAmountCandidates)
    resolved_amount: Decimal = Decimal("0")  # set by the resolver only

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED


@dataclass(frozen=True)
class OrderSummary:
    """Display row for one order of a customer."""

    order_id: int
    vehicle: str
    status: OrderStatus
    status_text: str
    order_date: date | None
    amount: Decimal  # revenue-bearing amount (0 when cancelled)
    last_known_amount: Decimal  # price before the cancellation rule
    amount_source: AmountSource
