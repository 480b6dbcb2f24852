"""In-memory data stores for dealer records and installment plans."""

from dealer_recon.store.dealer import DealerDataStore

__all__ = ["DealerDataStore"]
