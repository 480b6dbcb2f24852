"""Dealer data store with referential integrity."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from dealer_recon.exceptions import MalformedRecordError, ReferentialIntegrityError
from dealer_recon.models import InstallmentPlan, PlanStatus, PlanUpdate
from dealer_recon.reconcile.parsing import parse_int, pick


@dataclass
class DealerDataStore:
    """In-memory store of raw dealer records and installment plans.

    Implements every collaborator the reconciliation core consumes:
    ``OrderSource``, ``PaymentFeedSource``, ``PlanLookup`` and
    ``PlanPersister``.
    """

    # Raw backend records
    orders: dict[int, Mapping[str, Any]] = field(default_factory=dict)
    completed_payments: list[Mapping[str, Any]] = field(default_factory=list)
    installment_payments: list[Mapping[str, Any]] = field(default_factory=list)
    vehicle_models: list[Mapping[str, Any]] = field(default_factory=list)

    # Plans
    plans: dict[int, InstallmentPlan] = field(default_factory=dict)

    # Relationship indexes
    _customer_orders: dict[int, list[int]] = field(default_factory=dict)
    _order_plans: dict[int, int] = field(default_factory=dict)

    def add_order(self, payload: Mapping[str, Any]) -> int:
        """Add a raw order. Returns its order id."""
        order_id = parse_int(pick(payload, "orderId", "order_id", "id"))
        customer_id = parse_int(pick(payload, "customerId", "customer_id"))
        if order_id is None or customer_id is None:
            raise MalformedRecordError("Order payload needs an order id and a customer id")

        if order_id not in self.orders:
            self._customer_orders.setdefault(customer_id, []).append(order_id)
        self.orders[order_id] = payload
        return order_id

    def add_completed_payment(self, payload: Mapping[str, Any]) -> None:
        """Add a row of the full-payment (TT) feed."""
        self._check_order(payload)
        self.completed_payments.append(payload)

    def add_installment_payment(self, payload: Mapping[str, Any]) -> None:
        """Add a row of the active installment (TG) feed."""
        self._check_order(payload)
        self.installment_payments.append(payload)

    def add_plan(self, plan: InstallmentPlan) -> None:
        """Add an installment plan for a known order."""
        if plan.order_id not in self.orders:
            raise ReferentialIntegrityError(f"Order {plan.order_id} not found")

        self.plans[plan.plan_id] = plan
        self._order_plans[plan.order_id] = plan.plan_id

    # OrderSource / PaymentFeedSource
    def fetch_orders_for_customer(self, customer_id: int) -> list[Mapping[str, Any]]:
        return [self.orders[oid] for oid in self._customer_orders.get(customer_id, [])]

    def fetch_completed_payments(self) -> list[Mapping[str, Any]]:
        return list(self.completed_payments)

    def fetch_active_installment_payments(self) -> list[Mapping[str, Any]]:
        return list(self.installment_payments)

    # PlanLookup
    def get_plan(self, plan_id: int) -> InstallmentPlan | None:
        return self.plans.get(plan_id)

    def get_plan_for_order(self, order_id: int) -> InstallmentPlan | None:
        plan_id = self._order_plans.get(order_id)
        return None if plan_id is None else self.plans.get(plan_id)

    # PlanPersister
    def persist_plan_update(self, update: PlanUpdate) -> bool:
        """Apply new plan values.

        Returns False for an unknown plan, and for an update that would
        add months back to the term.

        The store keeps only status and remaining term from the update,
        like the backend endpoint; the outstanding amount is re-derived
        from the monthly payment for the months no longer due.
        """
        plan = self.plans.get(update.plan_id)
        if plan is None:
            return False
        if update.remaining_term_months > plan.remaining_term_months:
            # Stale update from an older snapshot
            return False

        months_paid = plan.remaining_term_months - update.remaining_term_months
        outstanding = max(
            plan.outstanding_amount - plan.monthly_pay * months_paid,
            Decimal("0"),
        )
        self.plans[update.plan_id] = dataclasses.replace(
            plan,
            status=update.status,
            remaining_term_months=update.remaining_term_months,
            outstanding_amount=outstanding,
        )
        return True

    # Query methods
    def customer_ids(self) -> list[int]:
        return sorted(self._customer_orders)

    def get_customer_plans(self, customer_id: int) -> list[InstallmentPlan]:
        return [plan for plan in self.plans.values() if plan.customer_id == customer_id]

    def open_plans(self) -> list[InstallmentPlan]:
        return [plan for plan in self.plans.values() if plan.status != PlanStatus.PAID]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "customers": len(self._customer_orders),
            "orders": len(self.orders),
            "completed_payments": len(self.completed_payments),
            "installment_payments": len(self.installment_payments),
            "plans": len(self.plans),
            "vehicle_models": len(self.vehicle_models),
        }

    def _check_order(self, payload: Mapping[str, Any]) -> None:
        order_id = parse_int(pick(payload, "orderId", "order_id"))
        if order_id is not None and order_id not in self.orders:
            raise ReferentialIntegrityError(f"Order {order_id} not found")
