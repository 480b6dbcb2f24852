"""Derived analytics views. Recomputed on demand, never persisted."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from dealer_recon.models.enums import Segment


@dataclass
class StaffStats:
    """Per-staff slice of a customer's orders."""

    order_count: int = 0  # includes cancelled orders
    revenue: Decimal = Decimal("0")  # excludes cancelled orders


@dataclass
class CustomerAnalytics:
    """Counts, revenue and segment for one customer."""

    customer_id: int | None
    total_orders: int
    active_order_count: int
    cancelled_order_count: int
    total_revenue: Decimal
    average_order_value: Decimal
    segment: Segment
    staff_distribution: dict[int, StaffStats] = field(default_factory=dict)
    first_order_date: date | None = None
    last_order_date: date | None = None
    primary_staff_id: int | None = None


@dataclass
class DebtSummary:
    """Installment debt of one customer across all plans."""

    customer_id: int
    total_plans: int = 0
    open_plans: int = 0
    overdue_plans: int = 0
    total_outstanding: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")


@dataclass
class StaffPerformance:
    """Orders and revenue handled by one dealer staff member."""

    staff_id: int
    total_orders: int = 0
    cancelled_orders: int = 0
    total_revenue: Decimal = Decimal("0")
    order_ids: list[int] = field(default_factory=list)
