"""Customer revenue aggregation."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable

from dealer_recon.config import SegmentThresholds
from dealer_recon.models import (
    CustomerAnalytics,
    CustomerStatus,
    NormalizedOrder,
    Segment,
    StaffStats,
)

ZERO = Decimal("0")

DEFAULT_THRESHOLDS = SegmentThresholds()


def segment_for(active_order_count: int, thresholds: SegmentThresholds | None = None) -> Segment:
    """Tier a customer by non-cancelled order count (VIP checked first)."""
    thresholds = thresholds or DEFAULT_THRESHOLDS
    if active_order_count >= thresholds.vip_min_orders:
        return Segment.VIP
    if active_order_count >= thresholds.regular_min_orders:
        return Segment.REGULAR
    return Segment.NEW


def aggregate(
    orders: Iterable[NormalizedOrder],
    thresholds: SegmentThresholds | None = None,
) -> CustomerAnalytics:
    """Build ``CustomerAnalytics`` from a customer's resolved orders.

    Cancelled orders count towards ``total_orders`` and each staff
    member's ``order_count`` but never towards revenue, the active count,
    or the first/last order dates. The result does not depend on the
    order of ``orders``.

    Parameters
    ----------
    orders : Iterable[NormalizedOrder]
        Orders with ``resolved_amount`` already set by the resolver.
    thresholds : SegmentThresholds | None
        Segment cut-offs (default VIP >= 5, REGULAR >= 2).

    Returns
    -------
    CustomerAnalytics
        Derived view; never persisted.
    """
    orders = list(orders)
    active = [order for order in orders if not order.is_cancelled]

    total_revenue = sum((order.resolved_amount for order in active), ZERO)
    average = total_revenue / len(active) if active else ZERO

    staff: dict[int, StaffStats] = defaultdict(StaffStats)
    for order in orders:
        if order.dealer_staff_id is None:
            continue
        stats = staff[order.dealer_staff_id]
        stats.order_count += 1
        if not order.is_cancelled:
            stats.revenue += order.resolved_amount

    dates = [order.order_date for order in active if order.order_date is not None]
    customer_ids = {order.customer_id for order in orders}

    return CustomerAnalytics(
        customer_id=customer_ids.pop() if len(customer_ids) == 1 else None,
        total_orders=len(orders),
        active_order_count=len(active),
        cancelled_order_count=len(orders) - len(active),
        total_revenue=total_revenue,
        average_order_value=average,
        segment=segment_for(len(active), thresholds),
        staff_distribution={staff_id: staff[staff_id] for staff_id in sorted(staff)},
        first_order_date=min(dates) if dates else None,
        last_order_date=max(dates) if dates else None,
        primary_staff_id=_primary_staff(staff),
    )


def aggregate_by_customer(
    orders: Iterable[NormalizedOrder],
    thresholds: SegmentThresholds | None = None,
) -> dict[int, CustomerAnalytics]:
    """Aggregate a mixed order list per customer id."""
    grouped: dict[int, list[NormalizedOrder]] = defaultdict(list)
    for order in orders:
        grouped[order.customer_id].append(order)
    return {
        customer_id: aggregate(grouped[customer_id], thresholds)
        for customer_id in sorted(grouped)
    }


def activity_status(
    analytics: CustomerAnalytics,
    as_of: date,
    inactive_after_months: int = 6,
) -> CustomerStatus:
    """ACTIVE if the customer ordered within the last ``inactive_after_months``."""
    if analytics.active_order_count == 0:
        return CustomerStatus.INACTIVE
    if analytics.last_order_date is None:
        return CustomerStatus.ACTIVE
    cutoff = _months_before(as_of, inactive_after_months)
    if analytics.last_order_date >= cutoff:
        return CustomerStatus.ACTIVE
    return CustomerStatus.INACTIVE


def _primary_staff(staff: dict[int, StaffStats]) -> int | None:
    # Most orders wins; ties go to the lowest id so the result is order-independent.
    if not staff:
        return None
    return min(staff, key=lambda staff_id: (-staff[staff_id].order_count, staff_id))


def _months_before(day: date, months: int) -> date:
    year, month = divmod(day.year * 12 + day.month - 1 - months, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))
