"""Custom exception hierarchy for dealer-recon."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dealer_recon.models.installment import InstallmentPlan


class DealerReconError(Exception):
    """Base exception for all dealer-recon errors."""


class EntityNotFoundError(DealerReconError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(DealerReconError):
    """Raised when an entity is in an invalid state for the operation."""


class MalformedRecordError(DealerReconError):
    """Raised when a raw record cannot be identified (no order or customer id)."""


class ConfigurationError(DealerReconError):
    """Raised when configuration is invalid or missing."""


class SinkError(DealerReconError):
    """Raised when a sink operation fails."""


class LedgerError(DealerReconError):
    """Base exception for installment ledger operations."""


class InvalidMonthsError(LedgerError):
    """Raised when the months to record are < 1 or exceed the remaining term."""


class AlreadyPaidError(LedgerError):
    """Raised when recording a payment against a plan that is already paid."""


class MissingPlanReferenceError(LedgerError):
    """Raised when no installment plan can be resolved for a payment."""


class PersistenceFailureError(LedgerError):
    """Raised when the plan update could not be persisted.

    The computed plan is attached as ``plan`` so the caller can flag or
    revert its provisional view; it was not committed.
    """

    def __init__(self, message: str, plan: InstallmentPlan | None = None) -> None:
        super().__init__(message)
        self.plan = plan
