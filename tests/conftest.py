"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Any, Callable

import pytest

from dealer_recon.models import (
    InstallmentPlan,
    NormalizedOrder,
    OrderAmountCandidates,
    OrderStatus,
    PlanStatus,
)
from dealer_recon.store import DealerDataStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def make_order() -> Callable[..., NormalizedOrder]:
    """Factory for resolved orders."""

    def _make(
        order_id: int,
        amount: str | int = 0,
        status: OrderStatus = OrderStatus.DELIVERED,
        customer_id: int = 1,
        staff_id: int | None = 1,
        order_date: date | None = None,
    ) -> NormalizedOrder:
        return NormalizedOrder(
            order_id=order_id,
            customer_id=customer_id,
            status=status,
            status_text=status.value.title(),
            order_date=order_date,
            dealer_staff_id=staff_id,
            resolved_amount=Decimal(0) if status == OrderStatus.CANCELLED else Decimal(amount),
        )

    return _make


@pytest.fixture
def make_plan() -> Callable[..., InstallmentPlan]:
    """Factory for installment plans."""

    def _make(
        remaining: int = 12,
        monthly: str = "10000000",
        status: PlanStatus = PlanStatus.ACTIVE,
        plan_id: int = 1,
        order_id: int = 100,
        customer_id: int = 1,
        outstanding: str | None = None,
        total: str = "240000000",
    ) -> InstallmentPlan:
        outstanding_amount = (
            Decimal(outstanding) if outstanding is not None else Decimal(monthly) * remaining
        )
        return InstallmentPlan(
            plan_id=plan_id,
            order_id=order_id,
            customer_id=customer_id,
            monthly_pay=Decimal(monthly),
            interest_rate=Decimal("7.5"),
            remaining_term_months=remaining,
            outstanding_amount=outstanding_amount,
            total_amount=Decimal(total),
            status=status,
        )

    return _make


@pytest.fixture
def raw_order() -> dict[str, Any]:
    """Raw order carrying every price source."""
    return {
        "orderId": 100,
        "customerId": 1,
        "dealerStaffId": 3,
        "modelId": 2,
        "orderDate": "2024-03-15 00:00:00",
        "status": "Delivered",
        "detail": {"quantity": "1", "unitPrice": "480000000", "serialId": "VF55-0001"},
        "confirmation": {"totalPrice": 468000000},
        "payment": {"paymentId": 9, "amount": 470000000.0},
    }


@pytest.fixture
def store(make_plan: Callable[..., InstallmentPlan]) -> DealerDataStore:
    """Store with two customers, both payment feeds and one plan."""
    store = DealerDataStore(
        vehicle_models=[{"modelId": 1, "modelName": "VF 3"}, {"modelId": 2, "modelName": "VF 5 Plus"}]
    )
    store.add_order(
        {
            "orderId": 1,
            "customerId": 1,
            "dealerStaffId": 1,
            "modelId": 1,
            "orderDate": "2024-01-10",
            "status": "Delivered",
            "detail": {"quantity": 1, "unitPrice": 240000000, "serialId": "VF3-001"},
        }
    )
    store.add_order(
        {
            "order_id": 2,
            "customer_id": 1,
            "dealer_staff_id": 2,
            "order_date": "2024-02-20 10:30:00",
            "status": "approved",
        }
    )
    store.add_order({"orderId": 3, "customerId": 1, "dealerStaffId": 1, "status": "Canceled"})
    store.add_order(
        {
            "orderId": 4,
            "customerId": 2,
            "dealerStaffId": 2,
            "orderDate": "2024-05-01",
            "status": "Pending",
            "confirmation": {"totalPrice": "689000000"},
        }
    )
    store.add_completed_payment({"paymentId": 10, "orderId": 3, "amount": 240000000, "method": "TT"})
    store.add_installment_payment(
        {"paymentId": 11, "orderId": 2, "planId": 7, "totalAmount": "468000000", "method": "TG"}
    )
    store.add_plan(
        make_plan(remaining=12, monthly="39000000", plan_id=7, order_id=2, total="468000000")
    )
    return store
