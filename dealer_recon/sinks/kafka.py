"""Kafka sink that publishes installment plan updates."""

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from confluent_kafka import Producer

from dealer_recon.config import KafkaConfig
from dealer_recon.exceptions import SinkError
from dealer_recon.models import Event, PlanUpdate
from dealer_recon.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

EVENT_SOURCE = "dealer-recon"
PLAN_UPDATED = "installment_plan.updated"


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaPlanUpdateSink:
    """``PlanPersister`` that writes plan updates to a Kafka topic.

    Every update is sent as an ``installment_plan.updated`` event keyed by
    plan id, so updates to one plan stay ordered within a partition. A
    call only reports success once the broker confirmed delivery.
    """

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize the sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.topic = config.plan_updates_topic
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def build_event(self, update: PlanUpdate) -> Event:
        return Event(
            event_id=uuid.uuid4().hex,
            event_type=PLAN_UPDATED,
            event_time=datetime.now(timezone.utc),
            source=EVENT_SOURCE,
            subject=str(update.plan_id),
            data=to_dict(update),
        )

    def send(self, event: Event) -> None:
        """Queue one event for delivery."""
        value = json.dumps(to_dict(event), ensure_ascii=False).encode("utf-8")
        try:
            self.producer.produce(
                topic=self.topic,
                key=event.subject.encode("utf-8"),
                value=value,
                callback=self._delivery_callback,
            )
        except BufferError as exc:
            raise SinkError(f"Producer queue full: {exc}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def persist_plan_update(self, update: PlanUpdate) -> bool:
        """Publish ``update`` and wait for the delivery report."""
        delivered_before = self.stats.delivered
        failed_before = self.stats.failed

        self.send(self.build_event(update))
        pending = self.producer.flush(self.config.delivery_timeout)

        if pending:
            logger.error("Plan %d update still pending after %.1fs", update.plan_id, self.config.delivery_timeout)
            return False
        if self.stats.failed > failed_before:
            return False
        return self.stats.delivered > delivered_before

    def close(self) -> None:
        """Flush and close the producer."""
        self.producer.flush(self.config.delivery_timeout)
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
