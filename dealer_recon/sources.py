"""Collaborator contracts consumed by the reconciliation core.

The transport layer that talks to the dealer backend implements these;
``DealerDataStore`` implements all of them in memory.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from dealer_recon.models import InstallmentPlan, PlanUpdate


@runtime_checkable
class OrderSource(Protocol):
    def fetch_orders_for_customer(self, customer_id: int) -> list[Mapping[str, Any]]:
        """Raw orders of one customer, sub-objects optional."""
        ...


@runtime_checkable
class PaymentFeedSource(Protocol):
    def fetch_completed_payments(self) -> list[Mapping[str, Any]]:
        """Full-payment (TT) completed payments feed."""
        ...

    def fetch_active_installment_payments(self) -> list[Mapping[str, Any]]:
        """Active installment (TG) feed."""
        ...


@runtime_checkable
class PlanLookup(Protocol):
    def get_plan(self, plan_id: int) -> InstallmentPlan | None: ...

    def get_plan_for_order(self, order_id: int) -> InstallmentPlan | None: ...


@runtime_checkable
class PlanPersister(Protocol):
    def persist_plan_update(self, update: PlanUpdate) -> bool:
        """Store the new plan values. Returns False when not committed."""
        ...
