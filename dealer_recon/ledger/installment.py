"""Installment ledger: records paid months against an installment plan.

Status transitions::

    ACTIVE  --pay, months left-->  ACTIVE
    OVERDUE --pay, months left-->  OVERDUE   (sticky until paid off)
    ACTIVE | OVERDUE --pay, no months left--> PAID (terminal)

Recording is not idempotent: every call decrements the remaining term.
Callers must re-read the plan before retrying a commit whose outcome is
unknown, and must not run two commits for the same plan concurrently.
"""

from __future__ import annotations

import dataclasses
import logging
from decimal import Decimal
from typing import Any, Mapping

from dealer_recon.exceptions import (
    AlreadyPaidError,
    InvalidMonthsError,
    MissingPlanReferenceError,
    PersistenceFailureError,
)
from dealer_recon.models import InstallmentPlan, PlanStatus, PlanUpdate
from dealer_recon.reconcile.normalizer import plan_from_payload
from dealer_recon.reconcile.parsing import parse_int, pick
from dealer_recon.sources import PlanLookup, PlanPersister

logger = logging.getLogger(__name__)


def record_payment(plan: InstallmentPlan, months: int) -> InstallmentPlan:
    """Record ``months`` monthly payments and return the updated plan.

    Parameters
    ----------
    plan : InstallmentPlan
        Current plan snapshot.
    months : int
        Number of months paid, 1 <= months <= remaining term.

    Returns
    -------
    InstallmentPlan
        New snapshot; ``plan`` itself is unchanged.

    Raises
    ------
    AlreadyPaidError
        If the plan is already PAID.
    InvalidMonthsError
        If ``months`` is not an integer in range.
    """
    if plan.status == PlanStatus.PAID:
        raise AlreadyPaidError(f"Plan {plan.plan_id} is already paid off")
    if isinstance(months, bool) or not isinstance(months, int):
        raise InvalidMonthsError(f"Months must be an integer, got {months!r}")
    if months < 1 or months > plan.remaining_term_months:
        raise InvalidMonthsError(
            f"Cannot record {months} month(s) on plan {plan.plan_id}: "
            f"{plan.remaining_term_months} month(s) remaining"
        )

    remaining = plan.remaining_term_months - months
    outstanding = max(Decimal("0"), plan.outstanding_amount - plan.monthly_pay * months)
    if remaining == 0:
        status = PlanStatus.PAID
    elif plan.status == PlanStatus.OVERDUE:
        status = PlanStatus.OVERDUE
    else:
        status = PlanStatus.ACTIVE

    return dataclasses.replace(
        plan,
        remaining_term_months=remaining,
        outstanding_amount=outstanding,
        status=status,
    )


def record_one_month(plan: InstallmentPlan) -> InstallmentPlan:
    """Record a single monthly payment."""
    return record_payment(plan, 1)


class InstallmentLedger:
    """Resolves plans and commits recorded payments to the plan store.

    Parameters
    ----------
    plans : PlanLookup | None
        Fallback lookup used when the caller holds only an order id or an
        incomplete feed row.
    persister : PlanPersister | None
        Collaborator that stores plan updates. Required by ``commit``.
    """

    def __init__(
        self,
        plans: PlanLookup | None = None,
        persister: PlanPersister | None = None,
    ) -> None:
        self.plans = plans
        self.persister = persister

    def resolve_plan(
        self,
        plan_id: int | None = None,
        order_id: int | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> InstallmentPlan:
        """Find the plan a payment should be recorded against.

        A feed row carrying every plan field wins. Otherwise the plan is
        looked up by plan id, then by order id (ids missing from the
        arguments are read from ``payload``).

        Raises
        ------
        MissingPlanReferenceError
            If no plan can be resolved.
        """
        if payload is not None:
            plan = plan_from_payload(payload)
            if plan is not None:
                return plan
            if plan_id is None:
                plan_id = parse_int(pick(payload, "planId", "plan_id"))
            if order_id is None:
                order_id = parse_int(pick(payload, "orderId", "order_id"))

        if self.plans is not None:
            if plan_id is not None:
                plan = self.plans.get_plan(plan_id)
                if plan is not None:
                    return plan
            if order_id is not None:
                plan = self.plans.get_plan_for_order(order_id)
                if plan is not None:
                    return plan

        raise MissingPlanReferenceError(
            f"No installment plan found (plan_id={plan_id}, order_id={order_id})"
        )

    def record_payment(self, plan: InstallmentPlan, months: int) -> InstallmentPlan:
        return record_payment(plan, months)

    def record_one_month(self, plan: InstallmentPlan) -> InstallmentPlan:
        return record_one_month(plan)

    def commit(self, plan: InstallmentPlan, months: int = 1) -> InstallmentPlan:
        """Record ``months`` on ``plan`` and persist the new values.

        Validation errors are raised before the persister is called. The
        returned plan is committed; on failure nothing is retried.

        Raises
        ------
        PersistenceFailureError
            If no persister is configured, the persister returns False,
            or it raises. ``exc.plan`` holds the uncommitted update.
        """
        updated = record_payment(plan, months)
        update = PlanUpdate.from_plan(updated)

        if self.persister is None:
            raise PersistenceFailureError("No plan persister configured", plan=updated)

        try:
            committed = self.persister.persist_plan_update(update)
        except Exception as exc:
            logger.error("Persisting plan %d failed: %s", plan.plan_id, exc)
            raise PersistenceFailureError(
                f"Persisting plan {plan.plan_id} failed: {exc}", plan=updated
            ) from exc

        if not committed:
            logger.error("Plan %d update was not confirmed by the store", plan.plan_id)
            raise PersistenceFailureError(
                f"Plan {plan.plan_id} update was not confirmed", plan=updated
            )

        logger.info(
            "Recorded %d month(s) on plan %d: %s, %d month(s) remaining, outstanding %s",
            months,
            plan.plan_id,
            updated.status.value,
            updated.remaining_term_months,
            updated.outstanding_amount,
            extra={
                "extra": {
                    "plan_id": plan.plan_id,
                    "order_id": plan.order_id,
                    "months": months,
                    "status": updated.status.value,
                    "remaining_term_months": updated.remaining_term_months,
                }
            },
        )
        return updated

    def commit_for_order(self, order_id: int, months: int = 1) -> InstallmentPlan:
        """Resolve the order's plan and commit ``months`` against it."""
        return self.commit(self.resolve_plan(order_id=order_id), months)
