"""Output sinks for reconciliation results and plan updates."""

from dealer_recon.sinks.json_file import JsonFileSink
from dealer_recon.sinks.kafka import KafkaPlanUpdateSink

__all__ = ["JsonFileSink", "KafkaPlanUpdateSink"]
