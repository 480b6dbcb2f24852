"""Synthetic dealer backend data with realistic shape drift."""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterator

from dealer_recon.generators.base import BaseGenerator
from dealer_recon.models import InstallmentPlan, PlanStatus
from dealer_recon.reconcile import normalize_order, resolve
from dealer_recon.store import DealerDataStore


class DealerDataGenerator(BaseGenerator):
    """Generate raw orders, payment feed rows and installment plans.

    Raw payloads mimic the dealer backend: keys in camelCase or
    snake_case, optional detail/confirmation/payment sub-objects, status
    text in mixed case with both spellings of "cancelled".
    """

    VEHICLE_MODELS = [
        (1, "VF 3", 240_000_000),
        (2, "VF 5 Plus", 468_000_000),
        (3, "VF 6", 689_000_000),
        (4, "VF 7", 799_000_000),
        (5, "VF 8", 1_019_000_000),
        (6, "VF 9", 1_491_000_000),
    ]

    STATUSES = ["Delivered", "Approved", "Pending", "Cancelled", "Processing"]
    STATUS_WEIGHTS = [0.45, 0.20, 0.15, 0.15, 0.05]
    CANCELLED_SPELLINGS = ["Cancelled", "canceled", "CANCEL", "cancelled"]

    TERMS = [6, 12, 24, 36]

    def __init__(
        self,
        seed: int | None = None,
        num_staff: int = 5,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> None:
        super().__init__(seed)
        self.num_staff = num_staff
        self.end_date = end_date or date.today()
        self.start_date = start_date or self.end_date - timedelta(days=2 * 365)
        self._next_order_id = 1
        self._next_payment_id = 1
        self._next_plan_id = 1
        self._list_prices: dict[int, int] = {}

    def vehicle_models(self) -> list[dict[str, Any]]:
        """Catalog rows as the backend returns them."""
        return [
            {"modelId": model_id, "modelName": name, "basePrice": price}
            for model_id, name, price in self.VEHICLE_MODELS
        ]

    def generate_orders(self, customer_id: int, count: int) -> Iterator[dict[str, Any]]:
        """Generate raw orders for one customer.

        Parameters
        ----------
        customer_id : int
            Owning customer.
        count : int
            Number of orders.

        Yields
        ------
        dict[str, Any]
            Raw order payload.
        """
        for _ in range(count):
            yield self._generate_order(customer_id)

    def generate(self, num_customers: int = 20, max_orders: int = 7) -> DealerDataStore:
        """Generate a populated store.

        Delivered and approved orders are paid in full (TT) or financed
        (TG, with a plan) at their resolved amount. Orders without a price
        of their own get the list price through the payment feed.
        """
        store = DealerDataStore(vehicle_models=self.vehicle_models())

        for customer_id in range(1, num_customers + 1):
            name = self.fake.name()
            for payload in self.generate_orders(customer_id, random.randint(1, max_orders)):
                store.add_order(payload)
                self._add_payments(store, payload, name)

        return store

    def _generate_order(self, customer_id: int) -> dict[str, Any]:
        order_id = self._next_order_id
        self._next_order_id += 1

        model_id, _, base_price = random.choice(self.VEHICLE_MODELS)
        status = random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        if status == "Cancelled":
            status = random.choice(self.CANCELLED_SPELLINGS)
        order_date = self.fake.date_between(start_date=self.start_date, end_date=self.end_date)
        serial_id = self.fake.bothify(text="VF##-####-????").upper()
        snake = random.random() < 0.5

        order: dict[str, Any] = {
            _key("orderId", snake): order_id,
            _key("customerId", snake): customer_id,
            _key("dealerStaffId", snake): random.randint(1, self.num_staff),
            _key("orderDate", snake): order_date.isoformat() + " 00:00:00",
            "status": status,
        }
        if random.random() < 0.7:
            order[_key("modelId", snake)] = model_id

        # Price sources, each optional
        if random.random() < 0.8:
            order["detail"] = {
                "quantity": str(random.choice([1, 1, 1, 2])),
                _key("unitPrice", snake): str(base_price),
                _key("serialId", snake): serial_id,
            }
        if random.random() < 0.4:
            discount = random.choice([0, 10_000_000, 25_000_000, 50_000_000])
            order["confirmation"] = {_key("totalPrice", snake): base_price - discount}
        if random.random() < 0.2:
            order["payment"] = {
                _key("paymentId", snake): self._payment_id(),
                "amount": float(base_price),
            }

        self._list_prices[order_id] = base_price
        return order

    def _add_payments(self, store: DealerDataStore, order: dict[str, Any], customer_name: str) -> None:
        status = str(order["status"]).lower()
        if status not in ("delivered", "approved"):
            return

        order_id = order.get("orderId", order.get("order_id"))
        customer_id = order.get("customerId", order.get("customer_id"))
        # Feeds carry the price the order resolves to; orders without a
        # price of their own are known only through the feed row
        amount = resolve(normalize_order(order))
        if amount <= 0:
            amount = Decimal(self._list_prices[order_id])
        paid_on = self.fake.date_between(start_date=self.start_date, end_date=self.end_date)

        roll = random.random()
        if roll < 0.5:
            store.add_completed_payment(
                {
                    "paymentId": self._payment_id(),
                    "orderId": order_id,
                    "customerId": customer_id,
                    "customerName": customer_name,
                    "amount": int(amount),
                    "paymentDate": paid_on.isoformat(),
                    "method": "TT",
                }
            )
        elif roll < 0.8:
            plan = self._generate_plan(order_id, customer_id, amount)
            store.add_plan(plan)
            store.add_installment_payment(
                {
                    "customerId": customer_id,
                    "name": customer_name,
                    "phoneNumber": self.fake.phone_number(),
                    "orderId": order_id,
                    "paymentId": plan.payment_id,
                    "planId": plan.plan_id,
                    "termMonth": str(plan.remaining_term_months),
                    "monthlyPay": str(plan.monthly_pay),
                    "interestRate": str(plan.interest_rate),
                    "totalAmount": str(plan.total_amount),
                    "paidAmount": str(plan.paid_amount),
                    "outstandingAmount": str(plan.outstanding_amount),
                    "status": plan.status.value.title(),
                    "method": "TG",
                }
            )

    def _generate_plan(self, order_id: int, customer_id: int, total: Decimal) -> InstallmentPlan:
        term = random.choice(self.TERMS)
        remaining = random.randint(1, term)
        monthly = (total / term / 1000).quantize(Decimal("1"), rounding=ROUND_HALF_UP) * 1000
        plan_id = self._next_plan_id
        self._next_plan_id += 1
        return InstallmentPlan(
            plan_id=plan_id,
            order_id=order_id,
            customer_id=customer_id,
            monthly_pay=monthly,
            interest_rate=Decimal(str(random.choice([0, 4.5, 7.5, 9.9]))),
            remaining_term_months=remaining,
            outstanding_amount=monthly * remaining,
            total_amount=total,
            status=PlanStatus.OVERDUE if random.random() < 0.15 else PlanStatus.ACTIVE,
            payment_id=self._payment_id(),
        )

    def _payment_id(self) -> int:
        payment_id = self._next_payment_id
        self._next_payment_id += 1
        return payment_id


def _key(camel: str, snake: bool) -> str:
    """Return ``camel`` or its snake_case spelling."""
    if not snake:
        return camel
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in camel)
