"""Sales performance per dealer staff member."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from dealer_recon.models import NormalizedOrder, StaffPerformance


def staff_report(
    orders: Iterable[NormalizedOrder],
    start: date | None = None,
    end: date | None = None,
) -> list[StaffPerformance]:
    """Summarize resolved orders by the staff member who handled them.

    Parameters
    ----------
    orders : Iterable[NormalizedOrder]
        Orders with ``resolved_amount`` set.
    start, end : date | None
        Inclusive order-date window. When either bound is given, orders
        without an order date are left out.

    Returns
    -------
    list[StaffPerformance]
        One row per staff member, highest revenue first.
    """
    windowed = start is not None or end is not None
    rows: dict[int, StaffPerformance] = {}

    for order in orders:
        if order.dealer_staff_id is None:
            continue
        if windowed:
            if order.order_date is None:
                continue
            if start is not None and order.order_date < start:
                continue
            if end is not None and order.order_date > end:
                continue

        row = rows.setdefault(order.dealer_staff_id, StaffPerformance(staff_id=order.dealer_staff_id))
        row.total_orders += 1
        row.order_ids.append(order.order_id)
        if order.is_cancelled:
            row.cancelled_orders += 1
        else:
            row.total_revenue += order.resolved_amount

    for row in rows.values():
        row.order_ids.sort()
    return sorted(rows.values(), key=lambda row: (-row.total_revenue, row.staff_id))
