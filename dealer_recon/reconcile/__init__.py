"""Normalization and amount resolution for raw dealer orders."""

from dealer_recon.reconcile.normalizer import (
    normalize_order,
    normalize_orders,
    payment_from_payload,
    plan_from_payload,
)
from dealer_recon.reconcile.payment_index import PaymentIndex
from dealer_recon.reconcile.resolver import (
    AmountResolution,
    resolve,
    resolve_orders,
    resolve_with_source,
)

__all__ = [
    "AmountResolution",
    "PaymentIndex",
    "normalize_order",
    "normalize_orders",
    "payment_from_payload",
    "plan_from_payload",
    "resolve",
    "resolve_orders",
    "resolve_with_source",
]
