"""Reconciliation service wiring the collaborators to the core."""

from __future__ import annotations

import logging

from dealer_recon.analytics import aggregate
from dealer_recon.catalog import VehicleCatalog
from dealer_recon.config import ReconConfig
from dealer_recon.models import CustomerAnalytics, NormalizedOrder, OrderSummary
from dealer_recon.reconcile import (
    PaymentIndex,
    normalize_orders,
    resolve_orders,
    resolve_with_source,
)
from dealer_recon.sources import OrderSource, PaymentFeedSource

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Fetch raw records, reconcile amounts and derive customer analytics.

    Parameters
    ----------
    orders : OrderSource
        Source of raw customer orders.
    payments : PaymentFeedSource
        Source of the TT and TG payment feeds.
    catalog : VehicleCatalog | None
        Vehicle naming for order summaries; an unloaded catalog is used
        when omitted.
    config : ReconConfig | None
        Segment thresholds and other settings.
    """

    def __init__(
        self,
        orders: OrderSource,
        payments: PaymentFeedSource,
        catalog: VehicleCatalog | None = None,
        config: ReconConfig | None = None,
    ) -> None:
        self.orders = orders
        self.payments = payments
        self.catalog = catalog or VehicleCatalog()
        self.config = config or ReconConfig()

    def payment_index(self) -> PaymentIndex:
        """Merge the TT feed, then the TG feed, into a fresh index."""
        return PaymentIndex.from_feeds(
            completed=self.payments.fetch_completed_payments(),
            active_installments=self.payments.fetch_active_installment_payments(),
        )

    def customer_orders(
        self,
        customer_id: int,
        index: PaymentIndex | None = None,
    ) -> list[NormalizedOrder]:
        """Normalized orders of a customer with amounts resolved."""
        if index is None:
            index = self.payment_index()
        raw = self.orders.fetch_orders_for_customer(customer_id)
        orders = normalize_orders(raw, customer_id=customer_id)
        logger.debug("Customer %d: %d raw orders, %d normalized", customer_id, len(raw), len(orders))
        return resolve_orders(orders, index)

    def customer_analytics(
        self,
        customer_id: int,
        index: PaymentIndex | None = None,
    ) -> CustomerAnalytics:
        """Analytics for one customer."""
        analytics = aggregate(
            self.customer_orders(customer_id, index),
            self.config.analytics.segments,
        )
        if analytics.customer_id is None:
            analytics.customer_id = customer_id
        return analytics

    def order_summaries(
        self,
        customer_id: int,
        index: PaymentIndex | None = None,
    ) -> list[OrderSummary]:
        """Display rows for a customer's orders, newest first."""
        if index is None:
            index = self.payment_index()
        raw = self.orders.fetch_orders_for_customer(customer_id)
        summaries = []
        for order in normalize_orders(raw, customer_id=customer_id):
            resolution = resolve_with_source(order, index)
            summaries.append(
                OrderSummary(
                    order_id=order.order_id,
                    vehicle=self.catalog.label_for(order),
                    status=order.status,
                    status_text=order.status_text,
                    order_date=order.order_date,
                    amount=resolution.amount,
                    last_known_amount=resolution.last_known_amount,
                    amount_source=resolution.source,
                )
            )
        summaries.sort(key=lambda row: (row.order_date is not None, row.order_date, row.order_id), reverse=True)
        return summaries
