"""Amount resolver: the single place an order's monetary amount is decided.

Precedence, first positive candidate wins:

1. sale confirmation total
2. order detail quantity x unit price
3. amount on the order's own payment sub-object
4. payment index entry for the order id
5. zero

A cancelled order always resolves to zero, however it was priced or
paid. The pre-cancellation amount stays available as
``AmountResolution.last_known_amount`` for display only.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from dealer_recon.models import AmountSource, NormalizedOrder
from dealer_recon.reconcile.parsing import positive

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class AmountResolution:
    """Resolved amount together with where it came from."""

    amount: Decimal
    source: AmountSource
    last_known_amount: Decimal


def resolve_with_source(
    order: NormalizedOrder,
    index: Mapping[int, Decimal] | None = None,
) -> AmountResolution:
    """Resolve an order's amount and report the winning candidate."""
    candidates = order.candidates

    if positive(candidates.confirmation_amount):
        amount, source = candidates.confirmation_amount, AmountSource.CONFIRMATION
    elif positive(candidates.detail_amount):
        amount, source = candidates.detail_amount, AmountSource.DETAIL
    elif positive(candidates.payment_amount):
        amount, source = candidates.payment_amount, AmountSource.PAYMENT
    elif index is not None and positive(index.get(order.order_id)):
        amount, source = index[order.order_id], AmountSource.PAYMENT_INDEX
    else:
        logger.debug("No amount source for order %d; resolving to 0", order.order_id)
        amount, source = ZERO, AmountSource.NONE

    if order.is_cancelled:
        return AmountResolution(amount=ZERO, source=source, last_known_amount=amount)
    return AmountResolution(amount=amount, source=source, last_known_amount=amount)


def resolve(order: NormalizedOrder, index: Mapping[int, Decimal] | None = None) -> Decimal:
    """Return the order's revenue-bearing amount. Never raises."""
    return resolve_with_source(order, index).amount


def resolve_orders(
    orders: Iterable[NormalizedOrder],
    index: Mapping[int, Decimal] | None = None,
) -> list[NormalizedOrder]:
    """Return copies of ``orders`` with ``resolved_amount`` filled in."""
    return [
        dataclasses.replace(order, resolved_amount=resolve(order, index))
        for order in orders
    ]
