"""Configuration management for dealer-recon."""

from dataclasses import dataclass, field
from typing import Any

from dealer_recon.exceptions import ConfigurationError


@dataclass
class KafkaConfig:
    """Kafka producer configuration for plan update publishing."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 0
    retries: int = 3
    plan_updates_topic: str = "dealer.installment-plans"
    delivery_timeout: float = 10.0  # seconds to wait for delivery confirmation

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "retries": self.retries,
        }


@dataclass
class SegmentThresholds:
    """Minimum non-cancelled order counts for each customer segment."""

    vip_min_orders: int = 5
    regular_min_orders: int = 2

    def __post_init__(self) -> None:
        if self.regular_min_orders < 1:
            raise ConfigurationError(
                f"regular_min_orders must be >= 1, got {self.regular_min_orders}"
            )
        if self.vip_min_orders <= self.regular_min_orders:
            raise ConfigurationError(
                "vip_min_orders must be greater than regular_min_orders "
                f"({self.vip_min_orders} <= {self.regular_min_orders})"
            )


@dataclass
class AnalyticsConfig:
    """Customer analytics configuration."""

    segments: SegmentThresholds = field(default_factory=SegmentThresholds)
    inactive_after_months: int = 6


@dataclass
class ReconConfig:
    """Main configuration for dealer-recon."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "ReconConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            plan_updates_topic=os.getenv("PLAN_UPDATES_TOPIC", "dealer.installment-plans"),
        )

        try:
            segments = SegmentThresholds(
                vip_min_orders=int(os.getenv("SEGMENT_VIP_MIN_ORDERS", "5")),
                regular_min_orders=int(os.getenv("SEGMENT_REGULAR_MIN_ORDERS", "2")),
            )
            inactive_after_months = int(os.getenv("INACTIVE_AFTER_MONTHS", "6"))
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            kafka=kafka,
            analytics=AnalyticsConfig(
                segments=segments,
                inactive_after_months=inactive_after_months,
            ),
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
