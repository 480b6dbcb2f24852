"""Order record normalizer and feed row readers."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping

from dealer_recon.exceptions import MalformedRecordError
from dealer_recon.models import (
    InstallmentPlan,
    NormalizedOrder,
    OrderAmountCandidates,
    OrderStatus,
    Payment,
    PaymentMethod,
    PlanStatus,
)
from dealer_recon.reconcile.parsing import (
    parse_date,
    parse_int,
    parse_money,
    pick,
    sub_object,
)

logger = logging.getLogger(__name__)


def normalize_order(
    payload: Mapping[str, Any],
    customer_id: int | None = None,
) -> NormalizedOrder:
    """Turn a raw order payload into a ``NormalizedOrder``.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Raw order, optionally carrying ``detail``, ``confirmation`` and
        ``payment`` sub-objects.
    customer_id : int | None
        Customer the order was fetched for; used when the payload does
        not name its customer.

    Returns
    -------
    NormalizedOrder
        Order with amount candidates populated and ``resolved_amount``
        left at zero.

    Raises
    ------
    MalformedRecordError
        If the payload is not a mapping or has no readable order or
        customer id.
    """
    if not isinstance(payload, Mapping):
        raise MalformedRecordError(f"Order payload is not a mapping: {type(payload).__name__}")

    order_id = parse_int(pick(payload, "orderId", "order_id", "id"))
    if order_id is None:
        raise MalformedRecordError(f"Order payload has no readable order id: {payload!r}")

    owner = parse_int(pick(payload, "customerId", "customer_id"))
    if owner is None:
        owner = customer_id
    if owner is None:
        raise MalformedRecordError(f"Order {order_id} has no readable customer id")

    detail = sub_object(payload, "detail", "orderDetail", "order_detail")
    confirmation = sub_object(payload, "confirmation", "saleConfirmation")
    payment = sub_object(payload, "payment")

    raw_status = pick(payload, "status", "orderStatus", "order_status")

    return NormalizedOrder(
        order_id=order_id,
        customer_id=owner,
        status=OrderStatus.parse(raw_status),
        status_text="" if raw_status is None else str(raw_status),
        model_id=parse_int(
            pick(payload, "modelId", "model_id") or pick(detail, "modelId", "model_id")
        ),
        serial_id=_serial_id(payload, detail),
        order_date=parse_date(pick(payload, "orderDate", "order_date", "OrderDate")),
        dealer_staff_id=_staff_id(payload),
        candidates=OrderAmountCandidates(
            detail_amount=_detail_amount(detail),
            confirmation_amount=parse_money(
                pick(confirmation, "totalPrice", "total_price", "totalAmount", "total_amount")
            ),
            payment_amount=parse_money(pick(payment, "amount", "totalAmount", "total_amount")),
            payment_id=parse_int(
                pick(payment, "paymentId", "payment_id") or pick(payload, "paymentId", "payment_id")
            ),
        ),
    )


def normalize_orders(
    payloads: Iterable[Mapping[str, Any]],
    customer_id: int | None = None,
) -> list[NormalizedOrder]:
    """Normalize a batch of raw orders, skipping unidentifiable records."""
    orders: list[NormalizedOrder] = []
    for payload in payloads:
        try:
            orders.append(normalize_order(payload, customer_id=customer_id))
        except MalformedRecordError as exc:
            logger.warning("Skipping order record: %s", exc)
    return orders


def payment_from_payload(payload: Mapping[str, Any], method: PaymentMethod) -> Payment:
    """Read one row of the TT (completed) or TG (active installment) feed.

    TG rows describe the customer's financed purchase, so their
    ``totalAmount`` is preferred over a bare ``amount``.
    """
    if method == PaymentMethod.TG:
        amount = parse_money(pick(payload, "totalAmount", "total_amount", "amount"))
    else:
        amount = parse_money(pick(payload, "amount", "totalAmount", "total_amount"))

    return Payment(
        payment_id=parse_int(pick(payload, "paymentId", "payment_id")),
        order_id=parse_int(pick(payload, "orderId", "order_id")),
        method=method,
        amount=amount,
        customer_id=parse_int(pick(payload, "customerId", "customer_id")),
        payment_date=parse_date(pick(payload, "paymentDate", "payment_date")),
    )


def plan_from_payload(payload: Mapping[str, Any]) -> InstallmentPlan | None:
    """Build a plan from an active-installment feed row.

    Returns ``None`` when the row lacks the plan id, the remaining term,
    the monthly payment, or the order/customer it belongs to; the ledger
    then falls back to a plan lookup.
    """
    plan_id = parse_int(pick(payload, "planId", "plan_id"))
    remaining = parse_int(pick(payload, "termMonth", "term_month", "currentTermMonth"))
    monthly_pay = parse_money(pick(payload, "monthlyPay", "monthly_pay"))
    order_id = parse_int(pick(payload, "orderId", "order_id"))
    customer_id = parse_int(pick(payload, "customerId", "customer_id"))
    if None in (plan_id, remaining, monthly_pay, order_id, customer_id):
        return None
    if remaining < 0 or monthly_pay < 0:
        logger.warning("Plan %s has negative term or monthly payment; ignoring row", plan_id)
        return None

    status = PlanStatus.parse(pick(payload, "status"))
    if status == PlanStatus.PAID and remaining > 0:
        logger.warning("Plan %s is PAID with %d months left; treating as paid off", plan_id, remaining)
        remaining = 0
    elif remaining == 0:
        status = PlanStatus.PAID

    outstanding = parse_money(pick(payload, "outstandingAmount", "outstanding_amount"))
    if outstanding is None:
        outstanding = monthly_pay * remaining
    outstanding = max(Decimal("0"), outstanding)

    total = parse_money(pick(payload, "totalAmount", "total_amount"))
    if total is None:
        paid = parse_money(pick(payload, "paidAmount", "paid_amount")) or Decimal("0")
        total = outstanding + paid

    return InstallmentPlan(
        plan_id=plan_id,
        order_id=order_id,
        customer_id=customer_id,
        monthly_pay=monthly_pay,
        interest_rate=parse_money(pick(payload, "interestRate", "interest_rate")) or Decimal("0"),
        remaining_term_months=remaining,
        outstanding_amount=outstanding,
        total_amount=total,
        status=status,
        payment_id=parse_int(pick(payload, "paymentId", "payment_id")),
    )


def _detail_amount(detail: Mapping[str, Any] | None) -> Decimal | None:
    """quantity x unit price; a missing quantity counts as one unit."""
    unit_price = parse_money(pick(detail, "unitPrice", "unit_price", "UnitPrice"))
    if unit_price is None:
        return None
    quantity = parse_money(pick(detail, "quantity", "Quantity"))
    if quantity is None:
        quantity = Decimal("1")
    return quantity * unit_price


def _serial_id(payload: Mapping[str, Any], detail: Mapping[str, Any] | None) -> str | None:
    serial = pick(detail, "serialId", "serial_id") or pick(payload, "serialId", "serial_id")
    return None if serial is None else str(serial)


def _staff_id(payload: Mapping[str, Any]) -> int | None:
    staff_id = parse_int(pick(payload, "dealerStaffId", "dealer_staff_id", "dealerStaff_id"))
    if staff_id is not None:
        return staff_id
    staff = sub_object(payload, "dealerStaff", "dealer_staff")
    return parse_int(pick(staff, "dealerStaffId", "dealer_staff_id", "id"))
