"""Order id to amount lookup built from the payment feeds."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Iterator, Mapping

from dealer_recon.models import Payment, PaymentMethod
from dealer_recon.reconcile.normalizer import payment_from_payload
from dealer_recon.reconcile.parsing import positive

logger = logging.getLogger(__name__)


class PaymentIndex(Mapping[int, Decimal]):
    """Read-only ``order_id -> amount`` mapping, first-seen-wins.

    Feeds are merged in the order they are added. Once an order has a
    positive amount it is never overwritten by a later payment; payments
    without an order id or without a positive amount are not indexed.
    """

    def __init__(self, payments: Iterable[Payment] = ()) -> None:
        self._amounts: dict[int, Decimal] = {}
        self.add_all(payments)

    @classmethod
    def from_feeds(
        cls,
        completed: Iterable[Mapping[str, Any]] = (),
        active_installments: Iterable[Mapping[str, Any]] = (),
    ) -> PaymentIndex:
        """Build an index from raw TT rows, then raw TG rows.

        Parameters
        ----------
        completed : Iterable[Mapping[str, Any]]
            Full-payment ("TT") completed-payments feed.
        active_installments : Iterable[Mapping[str, Any]]
            Active installment ("TG") feed.

        Returns
        -------
        PaymentIndex
            Merged index.
        """
        index = cls()
        added = index.add_all(payment_from_payload(row, PaymentMethod.TT) for row in completed)
        added += index.add_all(
            payment_from_payload(row, PaymentMethod.TG) for row in active_installments
        )
        logger.debug("Payment index built: %d orders from %d indexed payments", len(index), added)
        return index

    def add(self, payment: Payment) -> bool:
        """Index one payment. Returns True if it supplied a new amount."""
        if payment.order_id is None or not positive(payment.amount):
            return False
        if payment.order_id in self._amounts:
            return False
        self._amounts[payment.order_id] = payment.amount
        return True

    def add_all(self, payments: Iterable[Payment]) -> int:
        return sum(1 for payment in payments if self.add(payment))

    def __getitem__(self, order_id: int) -> Decimal:
        return self._amounts[order_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def __repr__(self) -> str:
        return f"PaymentIndex({len(self._amounts)} orders)"
