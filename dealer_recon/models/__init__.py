"""Domain models for dealer order reconciliation."""

from dealer_recon.models.analytics import (
    CustomerAnalytics,
    DebtSummary,
    StaffPerformance,
    StaffStats,
)
from dealer_recon.models.base import Event
from dealer_recon.models.enums import (
    AmountSource,
    CustomerStatus,
    OrderStatus,
    PaymentMethod,
    PlanStatus,
    Segment,
)
from dealer_recon.models.installment import InstallmentPlan, PlanUpdate
from dealer_recon.models.order import NormalizedOrder, OrderAmountCandidates, OrderSummary
from dealer_recon.models.payment import Payment

__all__ = [
    "AmountSource",
    "CustomerAnalytics",
    "CustomerStatus",
    "DebtSummary",
    "Event",
    "InstallmentPlan",
    "NormalizedOrder",
    "OrderAmountCandidates",
    "OrderStatus",
    "OrderSummary",
    "Payment",
    "PaymentMethod",
    "PlanStatus",
    "PlanUpdate",
    "Segment",
    "StaffPerformance",
    "StaffStats",
]
