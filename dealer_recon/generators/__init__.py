"""Synthetic data generators for dealer backend records."""

from dealer_recon.generators.dealer import DealerDataGenerator

__all__ = ["DealerDataGenerator"]
