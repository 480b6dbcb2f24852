"""Tests for the payment index and the amount resolver."""

from decimal import Decimal

import pytest

from dealer_recon.models import (
    AmountSource,
    NormalizedOrder,
    OrderAmountCandidates,
    OrderStatus,
    Payment,
    PaymentMethod,
)
from dealer_recon.reconcile import PaymentIndex, resolve, resolve_orders, resolve_with_source


def _order(
    order_id: int = 1,
    status: OrderStatus = OrderStatus.DELIVERED,
    detail: str | None = None,
    confirmation: str | None = None,
    payment: str | None = None,
) -> NormalizedOrder:
    return NormalizedOrder(
        order_id=order_id,
        customer_id=1,
        status=status,
        candidates=OrderAmountCandidates(
            detail_amount=None if detail is None else Decimal(detail),
            confirmation_amount=None if confirmation is None else Decimal(confirmation),
            payment_amount=None if payment is None else Decimal(payment),
        ),
    )


def _payment(order_id: int | None, amount: str | None, method: PaymentMethod = PaymentMethod.TT) -> Payment:
    return Payment(
        payment_id=None,
        order_id=order_id,
        method=method,
        amount=None if amount is None else Decimal(amount),
    )


class TestPaymentIndex:
    """Tests for PaymentIndex."""

    def test_first_seen_wins(self) -> None:
        index = PaymentIndex([_payment(1, "100"), _payment(1, "200")])

        assert index[1] == Decimal("100")
        assert len(index) == 1

    def test_completed_feed_merged_first(self) -> None:
        index = PaymentIndex.from_feeds(
            completed=[{"orderId": 5, "amount": "240000000"}],
            active_installments=[{"orderId": 5, "totalAmount": "999"}, {"orderId": 6, "totalAmount": "468000000"}],
        )

        assert index[5] == Decimal("240000000")
        assert index[6] == Decimal("468000000")
        assert sorted(index) == [5, 6]

    def test_non_positive_amounts_not_indexed(self) -> None:
        index = PaymentIndex()

        assert index.add(_payment(1, "0")) is False
        assert index.add(_payment(2, "-5")) is False
        assert index.add(_payment(3, None)) is False
        assert index.add(_payment(None, "100")) is False
        assert len(index) == 0

    def test_zero_does_not_block_later_feed(self) -> None:
        index = PaymentIndex.from_feeds(
            completed=[{"orderId": 5, "amount": 0}],
            active_installments=[{"orderId": 5, "totalAmount": "468000000"}],
        )

        assert index[5] == Decimal("468000000")

    def test_add_all_counts_new_entries(self) -> None:
        index = PaymentIndex()

        assert index.add_all([_payment(1, "1"), _payment(1, "2"), _payment(2, "3")]) == 2

    def test_mapping_interface(self) -> None:
        index = PaymentIndex([_payment(1, "100")])

        assert 1 in index
        assert index.get(2) is None
        assert repr(index) == "PaymentIndex(1 orders)"
        with pytest.raises(KeyError):
            index[2]


class TestResolve:
    """Tests for resolve and resolve_with_source."""

    def test_confirmation_beats_detail(self) -> None:
        order = _order(detail="480000000", confirmation="468000000", payment="470000000")

        assert resolve(order) == Decimal("468000000")
        assert resolve_with_source(order).source == AmountSource.CONFIRMATION

    @pytest.mark.parametrize(("confirmation", "detail"), [("1", "2"), ("2", "1"), ("0.01", "999999999")])
    def test_precedence_holds_for_any_amounts(self, confirmation, detail) -> None:
        assert resolve(_order(detail=detail, confirmation=confirmation)) == Decimal(confirmation)

    def test_detail_when_no_confirmation(self) -> None:
        order = _order(detail="480000000", payment="470000000")

        assert resolve_with_source(order).source == AmountSource.DETAIL
        assert resolve(order) == Decimal("480000000")

    def test_zero_confirmation_falls_through(self) -> None:
        assert resolve(_order(detail="480000000", confirmation="0")) == Decimal("480000000")

    def test_embedded_payment(self) -> None:
        order = _order(payment="470000000")

        assert resolve_with_source(order).source == AmountSource.PAYMENT
        assert resolve(order) == Decimal("470000000")

    def test_embedded_payment_beats_index(self) -> None:
        index = PaymentIndex([_payment(1, "1")])

        assert resolve(_order(payment="470000000"), index) == Decimal("470000000")

    def test_index_fallback(self) -> None:
        index = PaymentIndex([_payment(1, "689000000")])
        resolution = resolve_with_source(_order(), index)

        assert resolution.amount == Decimal("689000000")
        assert resolution.source == AmountSource.PAYMENT_INDEX

    def test_index_entry_for_other_order(self) -> None:
        index = PaymentIndex([_payment(2, "689000000")])

        assert resolve(_order(order_id=1), index) == Decimal("0")

    def test_no_source(self) -> None:
        resolution = resolve_with_source(_order())

        assert resolution.amount == Decimal("0")
        assert resolution.source == AmountSource.NONE

    @pytest.mark.parametrize(
        "candidates",
        [
            {"confirmation": "468000000"},
            {"detail": "480000000"},
            {"payment": "470000000"},
            {"detail": "1", "confirmation": "2", "payment": "3"},
            {},
        ],
    )
    def test_cancelled_resolves_to_zero(self, candidates) -> None:
        index = PaymentIndex([_payment(1, "240000000")])
        order = _order(status=OrderStatus.CANCELLED, **candidates)

        assert resolve(order, index) == Decimal("0")

    def test_cancelled_keeps_last_known_amount(self) -> None:
        resolution = resolve_with_source(_order(status=OrderStatus.CANCELLED, detail="480000000"))

        assert resolution.amount == Decimal("0")
        assert resolution.last_known_amount == Decimal("480000000")
        assert resolution.source == AmountSource.DETAIL

    def test_plain_mapping_as_index(self) -> None:
        assert resolve(_order(), {1: Decimal("5")}) == Decimal("5")


class TestResolveOrders:
    """Tests for resolve_orders."""

    def test_returns_resolved_copies(self) -> None:
        orders = [_order(1, detail="100"), _order(2), _order(3, status=OrderStatus.CANCELLED, detail="300")]
        index = PaymentIndex([_payment(2, "200")])

        resolved = resolve_orders(orders, index)

        assert [order.resolved_amount for order in resolved] == [
            Decimal("100"),
            Decimal("200"),
            Decimal("0"),
        ]
        assert all(order.resolved_amount == Decimal("0") for order in orders)
