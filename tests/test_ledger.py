"""Tests for the installment ledger."""

import json
import logging
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from dealer_recon.exceptions import (
    AlreadyPaidError,
    InvalidEntityStateError,
    InvalidMonthsError,
    MissingPlanReferenceError,
    PersistenceFailureError,
)
from dealer_recon.ledger import InstallmentLedger, record_one_month, record_payment
from dealer_recon.logging import JsonFormatter
from dealer_recon.models import PlanStatus, PlanUpdate


class TestRecordPayment:
    """Tests for the pure record_payment transition."""

    def test_two_months(self, make_plan) -> None:
        plan = make_plan(remaining=6, monthly="1000000")

        updated = record_payment(plan, 2)

        assert updated.remaining_term_months == 4
        assert updated.outstanding_amount == Decimal("4000000")
        assert updated.status == PlanStatus.ACTIVE

    def test_input_unchanged(self, make_plan) -> None:
        plan = make_plan(remaining=6, monthly="1000000")

        record_payment(plan, 2)

        assert plan.remaining_term_months == 6
        assert plan.outstanding_amount == Decimal("6000000")

    def test_last_month_pays_off(self, make_plan) -> None:
        plan = make_plan(remaining=1, monthly="1000000")

        paid = record_one_month(plan)

        assert paid.remaining_term_months == 0
        assert paid.status == PlanStatus.PAID
        assert paid.is_paid
        with pytest.raises(AlreadyPaidError):
            record_payment(paid, 1)

    def test_pay_all_remaining(self, make_plan) -> None:
        paid = record_payment(make_plan(remaining=3), 3)

        assert paid.status == PlanStatus.PAID
        assert paid.outstanding_amount == Decimal("0")

    def test_overdue_stays_overdue(self, make_plan) -> None:
        plan = make_plan(remaining=5, status=PlanStatus.OVERDUE)

        updated = record_payment(plan, 2)

        assert updated.status == PlanStatus.OVERDUE
        assert updated.remaining_term_months == 3

    def test_overdue_paid_off(self, make_plan) -> None:
        plan = make_plan(remaining=2, status=PlanStatus.OVERDUE)

        assert record_payment(plan, 2).status == PlanStatus.PAID

    def test_outstanding_never_negative(self, make_plan) -> None:
        plan = make_plan(remaining=3, monthly="1000000", outstanding="1500000")

        updated = record_payment(plan, 2)

        assert updated.outstanding_amount == Decimal("0")
        assert updated.status == PlanStatus.ACTIVE

    def test_paid_keeps_residual_outstanding(self, make_plan) -> None:
        plan = make_plan(remaining=1, monthly="1000000", outstanding="1000500")

        paid = record_one_month(plan)

        assert paid.status == PlanStatus.PAID
        assert paid.outstanding_amount == Decimal("500")

    @pytest.mark.parametrize("months", [0, -1, 13, 100])
    def test_months_out_of_range(self, make_plan, months) -> None:
        with pytest.raises(InvalidMonthsError):
            record_payment(make_plan(remaining=12), months)

    @pytest.mark.parametrize("months", [1.0, "1", True, None])
    def test_months_not_integer(self, make_plan, months) -> None:
        with pytest.raises(InvalidMonthsError):
            record_payment(make_plan(remaining=12), months)

    def test_already_paid_checked_first(self, make_plan) -> None:
        paid = record_payment(make_plan(remaining=1), 1)

        with pytest.raises(AlreadyPaidError):
            record_payment(paid, 0)

    def test_not_idempotent(self, make_plan) -> None:
        plan = make_plan(remaining=6)

        once = record_one_month(plan)
        twice = record_one_month(once)

        assert once.remaining_term_months == 5
        assert twice.remaining_term_months == 4


class TestInstallmentPlanModel:
    """Tests for plan invariants."""

    def test_paid_requires_zero_months(self, make_plan) -> None:
        with pytest.raises(InvalidEntityStateError):
            make_plan(remaining=3, status=PlanStatus.PAID)

    def test_zero_months_requires_paid(self, make_plan) -> None:
        with pytest.raises(InvalidEntityStateError):
            make_plan(remaining=0, status=PlanStatus.ACTIVE, outstanding="0")

    def test_negative_term(self, make_plan) -> None:
        with pytest.raises(InvalidEntityStateError):
            make_plan(remaining=-1, outstanding="0")

    def test_negative_outstanding(self, make_plan) -> None:
        with pytest.raises(InvalidEntityStateError):
            make_plan(remaining=3, outstanding="-1")

    def test_paid_amount(self, make_plan) -> None:
        plan = make_plan(remaining=2, monthly="10", total="100")

        assert plan.paid_amount == Decimal("80")

    def test_plan_update_from_plan(self, make_plan) -> None:
        update = PlanUpdate.from_plan(make_plan(plan_id=7, remaining=4))

        assert update == PlanUpdate(plan_id=7, status=PlanStatus.ACTIVE, remaining_term_months=4)


class TestResolvePlan:
    """Tests for InstallmentLedger.resolve_plan."""

    def test_complete_payload_wins(self, store) -> None:
        ledger = InstallmentLedger(plans=store)
        payload = {
            "planId": 99,
            "orderId": 2,
            "customerId": 1,
            "termMonth": 3,
            "monthlyPay": "100",
        }

        plan = ledger.resolve_plan(payload=payload)

        assert plan.plan_id == 99
        assert plan.remaining_term_months == 3

    def test_incomplete_payload_falls_back_to_plan_id(self, store) -> None:
        plan = InstallmentLedger(plans=store).resolve_plan(payload={"planId": 7})

        assert plan.plan_id == 7

    def test_lookup_by_order(self, store) -> None:
        plan = InstallmentLedger(plans=store).resolve_plan(order_id=2)

        assert plan.plan_id == 7

    def test_unknown_plan_id_falls_back_to_order(self, store) -> None:
        plan = InstallmentLedger(plans=store).resolve_plan(plan_id=404, order_id=2)

        assert plan.plan_id == 7

    def test_missing_reference(self, store) -> None:
        with pytest.raises(MissingPlanReferenceError):
            InstallmentLedger(plans=store).resolve_plan(order_id=1)

    def test_no_lookup(self) -> None:
        with pytest.raises(MissingPlanReferenceError):
            InstallmentLedger().resolve_plan(plan_id=7)


class TestLedgerDelegates:
    """The ledger's record methods match the pure functions."""

    def test_record_methods(self, make_plan) -> None:
        ledger = InstallmentLedger()
        plan = make_plan(remaining=6, monthly="1000000")

        assert ledger.record_payment(plan, 2) == record_payment(plan, 2)
        assert ledger.record_one_month(plan) == record_one_month(plan)


class TestCommit:
    """Tests for InstallmentLedger.commit."""

    def test_commit_to_store(self, store, caplog: pytest.LogCaptureFixture) -> None:
        ledger = InstallmentLedger(plans=store, persister=store)

        with caplog.at_level(logging.INFO, logger="dealer_recon"):
            updated = ledger.commit(store.get_plan(7), months=2)

        assert updated.remaining_term_months == 10
        stored = store.get_plan(7)
        assert stored.remaining_term_months == 10
        assert stored.outstanding_amount == Decimal("390000000")
        assert stored.status == PlanStatus.ACTIVE
        assert "Recorded 2 month(s) on plan 7" in caplog.text

    def test_commit_log_carries_plan_context(self, store, caplog: pytest.LogCaptureFixture) -> None:
        ledger = InstallmentLedger(plans=store, persister=store)

        with caplog.at_level(logging.INFO, logger="dealer_recon"):
            ledger.commit(store.get_plan(7))

        record = next(r for r in caplog.records if r.name == "dealer_recon.ledger.installment")
        data = json.loads(JsonFormatter().format(record))
        assert data["plan_id"] == 7
        assert data["order_id"] == 2
        assert data["months"] == 1
        assert data["status"] == "ACTIVE"
        assert data["remaining_term_months"] == 11

    def test_commit_for_order(self, store) -> None:
        ledger = InstallmentLedger(plans=store, persister=store)

        updated = ledger.commit_for_order(2)

        assert updated.remaining_term_months == 11
        assert store.get_plan_for_order(2).remaining_term_months == 11

    def test_validation_before_persist(self, make_plan) -> None:
        persister = MagicMock()
        ledger = InstallmentLedger(persister=persister)

        with pytest.raises(InvalidMonthsError):
            ledger.commit(make_plan(remaining=2), months=3)

        persister.persist_plan_update.assert_not_called()

    def test_persister_receives_update(self, make_plan) -> None:
        persister = MagicMock()
        persister.persist_plan_update.return_value = True
        ledger = InstallmentLedger(persister=persister)

        ledger.commit(make_plan(plan_id=3, remaining=1))

        persister.persist_plan_update.assert_called_once_with(
            PlanUpdate(plan_id=3, status=PlanStatus.PAID, remaining_term_months=0)
        )

    def test_persister_returns_false(self, make_plan) -> None:
        persister = MagicMock()
        persister.persist_plan_update.return_value = False
        ledger = InstallmentLedger(persister=persister)

        with pytest.raises(PersistenceFailureError) as exc_info:
            ledger.commit(make_plan(remaining=4))

        assert exc_info.value.plan.remaining_term_months == 3

    def test_persister_raises(self, make_plan) -> None:
        persister = MagicMock()
        persister.persist_plan_update.side_effect = ConnectionError("backend down")
        ledger = InstallmentLedger(persister=persister)

        with pytest.raises(PersistenceFailureError) as exc_info:
            ledger.commit(make_plan(remaining=4))

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.plan.remaining_term_months == 3

    def test_no_persister(self, make_plan) -> None:
        with pytest.raises(PersistenceFailureError):
            InstallmentLedger().commit(make_plan(remaining=4))

    def test_unknown_plan_in_store(self, store, make_plan) -> None:
        ledger = InstallmentLedger(persister=store)

        with pytest.raises(PersistenceFailureError):
            ledger.commit(make_plan(plan_id=404, remaining=4))

    def test_already_paid_not_persisted(self, make_plan) -> None:
        persister = MagicMock()
        ledger = InstallmentLedger(persister=persister)
        paid = record_payment(make_plan(remaining=1), 1)

        with pytest.raises(AlreadyPaidError):
            ledger.commit(paid)

        persister.persist_plan_update.assert_not_called()
