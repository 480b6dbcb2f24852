"""Per-customer installment debt summary."""

from __future__ import annotations

from typing import Iterable

from dealer_recon.models import DebtSummary, InstallmentPlan, PlanStatus


def summarize_debt(plans: Iterable[InstallmentPlan]) -> dict[int, DebtSummary]:
    """Sum outstanding and paid amounts of every plan, keyed by customer id."""
    summaries: dict[int, DebtSummary] = {}
    for plan in plans:
        summary = summaries.setdefault(plan.customer_id, DebtSummary(customer_id=plan.customer_id))
        summary.total_plans += 1
        if plan.status != PlanStatus.PAID:
            summary.open_plans += 1
        if plan.status == PlanStatus.OVERDUE:
            summary.overdue_plans += 1
        summary.total_outstanding += plan.outstanding_amount
        summary.total_paid += plan.paid_amount
    return dict(sorted(summaries.items()))
