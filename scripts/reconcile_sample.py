#!/usr/bin/env python3
"""Reconcile a synthetic dealer dataset and write the reports as JSON.

This script generates dealer orders, payment feeds and installment plans,
then produces:
- customer_analytics.json: revenue, segment and activity per customer
- order_summaries.json: resolved amount and vehicle label per order
- debt_summaries.json: installment debt per customer
- staff_performance.json: orders and revenue per dealer staff member

With --record-payments, one month is recorded on every open plan and the
updates are committed to the store (or published to Kafka with --kafka).
"""

import argparse
import dataclasses
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dealer_recon.analytics import activity_status, staff_report, summarize_debt
from dealer_recon.catalog import VehicleCatalog
from dealer_recon.config import ReconConfig
from dealer_recon.exceptions import DealerReconError
from dealer_recon.generators import DealerDataGenerator
from dealer_recon.ledger import InstallmentLedger
from dealer_recon.logging import setup_logging
from dealer_recon.service import ReconciliationService
from dealer_recon.sinks import JsonFileSink, KafkaPlanUpdateSink
from dealer_recon.sinks.serialization import to_dict
from dealer_recon.store import DealerDataStore

logger = logging.getLogger(__name__)


def record_payments(store: DealerDataStore, ledger: InstallmentLedger) -> int:
    """Record one month on every open plan. Returns the number committed."""
    committed = 0
    for plan in store.open_plans():
        try:
            ledger.commit(plan, months=1)
        except DealerReconError as exc:
            logger.warning("Plan %d not updated: %s", plan.plan_id, exc)
            continue
        committed += 1
    return committed


def main() -> None:
    """Main entry point."""
    config = ReconConfig.from_env()

    parser = argparse.ArgumentParser(description="Reconcile synthetic dealer data")
    parser.add_argument(
        "--customers",
        type=int,
        default=20,
        help="Number of customers to generate (default: 20)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed if config.seed is not None else 42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=project_root / "local",
        help="Directory for the JSON reports (default: ./local)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=date.today(),
        help="Reference date for customer activity (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--record-payments",
        action="store_true",
        help="Record one month on every open installment plan",
    )
    parser.add_argument(
        "--kafka",
        action="store_true",
        help="Publish plan updates to Kafka instead of the in-memory store",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        type=str,
        default=config.kafka.bootstrap_servers,
        help="Kafka bootstrap servers",
    )
    args = parser.parse_args()

    setup_logging(config.log_level, config.log_format)

    logger.info("=" * 60)
    logger.info("Dealer Reconciliation")
    logger.info("  Customers: %d", args.customers)
    logger.info("  Seed: %d", args.seed)
    logger.info("  As of: %s", args.as_of.isoformat())
    logger.info("=" * 60)

    store = DealerDataGenerator(seed=args.seed, end_date=args.as_of).generate(args.customers)
    for entity, count in store.summary().items():
        logger.info("  %s: %d", entity, count)

    service = ReconciliationService(
        orders=store,
        payments=store,
        catalog=VehicleCatalog(store.vehicle_models),
        config=config,
    )
    index = service.payment_index()
    logger.info("Payment index: %d orders with a feed amount", len(index))

    analytics_rows = []
    summaries = []
    all_orders = []
    for customer_id in store.customer_ids():
        analytics = service.customer_analytics(customer_id, index)
        row = to_dict(analytics)
        row["activity_status"] = activity_status(
            analytics,
            args.as_of,
            config.analytics.inactive_after_months,
        ).value
        analytics_rows.append(row)
        summaries.extend(service.order_summaries(customer_id, index))
        all_orders.extend(service.customer_orders(customer_id, index))

    if args.record_payments:
        if args.kafka:
            sink = KafkaPlanUpdateSink(dataclasses.replace(config.kafka, bootstrap_servers=args.kafka_bootstrap))
            ledger = InstallmentLedger(plans=store, persister=sink)
            try:
                committed = record_payments(store, ledger)
            finally:
                sink.close()
        else:
            committed = record_payments(store, InstallmentLedger(plans=store, persister=store))
        logger.info("Recorded one month on %d plan(s)", committed)

    output = JsonFileSink(args.output_dir, pretty=True)
    output.write_batch("customer_analytics", analytics_rows)
    output.write_batch("order_summaries", summaries)
    output.write_batch("debt_summaries", list(summarize_debt(store.plans.values()).values()))
    output.write_batch("staff_performance", staff_report(all_orders))
    output.close()


if __name__ == "__main__":
    main()
