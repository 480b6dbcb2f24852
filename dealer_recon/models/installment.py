"""Installment plan models."""

from dataclasses import dataclass
from decimal import Decimal

from dealer_recon.exceptions import InvalidEntityStateError
from dealer_recon.models.enums import PlanStatus


@dataclass(frozen=True)
class InstallmentPlan:
    """Amortization schedule for an installment (TG) payment.

    Plans are immutable snapshots; the ledger returns a new snapshot for
    every recorded payment.
    """

    plan_id: int
    order_id: int
    customer_id: int
    monthly_pay: Decimal
    interest_rate: Decimal  # percentage, e.g. Decimal("7.5")
    remaining_term_months: int
    outstanding_amount: Decimal
    total_amount: Decimal  # resolved order amount when the plan was booked
    status: PlanStatus
    payment_id: int | None = None

    def __post_init__(self) -> None:
        if self.remaining_term_months < 0:
            raise InvalidEntityStateError(
                f"Plan {self.plan_id} has negative remaining term {self.remaining_term_months}"
            )
        if self.outstanding_amount < 0:
            raise InvalidEntityStateError(
                f"Plan {self.plan_id} has negative outstanding amount {self.outstanding_amount}"
            )
        if (self.status == PlanStatus.PAID) != (self.remaining_term_months == 0):
            raise InvalidEntityStateError(
                f"Plan {self.plan_id} is {self.status.value} with "
                f"{self.remaining_term_months} months remaining"
            )

    @property
    def paid_amount(self) -> Decimal:
        return max(Decimal("0"), self.total_amount - self.outstanding_amount)

    @property
    def is_paid(self) -> bool:
        return self.status == PlanStatus.PAID


@dataclass(frozen=True)
class PlanUpdate:
    """New plan values handed to the persistence collaborator."""

    plan_id: int
    status: PlanStatus
    remaining_term_months: int

    @classmethod
    def from_plan(cls, plan: InstallmentPlan) -> "PlanUpdate":
        return cls(
            plan_id=plan.plan_id,
            status=plan.status,
            remaining_term_months=plan.remaining_term_months,
        )
