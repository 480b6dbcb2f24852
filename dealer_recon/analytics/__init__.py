"""Analytics derived from resolved orders and installment plans."""

from dealer_recon.analytics.customer import (
    activity_status,
    aggregate,
    aggregate_by_customer,
    segment_for,
)
from dealer_recon.analytics.debt import summarize_debt
from dealer_recon.analytics.staff import staff_report

__all__ = [
    "activity_status",
    "aggregate",
    "aggregate_by_customer",
    "segment_for",
    "staff_report",
    "summarize_debt",
]
