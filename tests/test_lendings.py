"""Lending service tests: derived status, repayments, forgiveness and deletion."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendwise.errors import DomainConflict, NotFoundError, ValidationError
from spendwise.models import LedgerSource
from spendwise.models.lending import LendingStatus
from spendwise.services import ledger
from spendwise.services import lendings as lending_service


@pytest.fixture
def lend(db_session, user, fund):
    fund("1000.00")

    def _lend(amount="300.00", **overrides):
        values = {
            "borrower_name": "Sam",
            "amount": amount,
            "lending_date": date(2024, 4, 1),
        }
        values.update(overrides)
        return lending_service.create_lending(db_session, user.id, **values)

    return _lend


def _repay(session, lending, user, amount, **kwargs):
    return lending_service.record_payment(
        session,
        lending.id,
        user.id,
        amount=amount,
        payment_date=kwargs.pop("payment_date", date(2024, 5, 1)),
        **kwargs,
    )


def test_create_deducts_from_balance(db_session, user, lend):
    lending = lend(currency="eur")

    assert lending.status == LendingStatus.PENDING
    assert lending.remaining_amount == Decimal("300.00")
    assert lending.currency == "EUR"
    assert ledger.current_balance(db_session, user.id) == Decimal("700.00")


def test_create_can_skip_the_balance(db_session, user, lend):
    lend(deduct_from_balance=False)

    assert ledger.current_balance(db_session, user.id) == Decimal("1000.00")


def test_repayments_derive_partial_then_paid(db_session, user, lend):
    lending = lend()

    _repay(db_session, lending, user, "100.00")
    assert lending.status == LendingStatus.PARTIAL
    assert lending.remaining_amount == Decimal("200.00")
    assert lending_service.progress_percentage(lending) == 33.33

    _repay(db_session, lending, user, "200.00")
    assert lending.status == LendingStatus.PAID
    assert lending.remaining_amount == Decimal("0.00")
    assert ledger.current_balance(db_session, user.id) == Decimal("1000.00")


def test_repayment_over_remaining_is_invalid(db_session, user, lend):
    lending = lend()

    with pytest.raises(ValidationError) as exc:
        _repay(db_session, lending, user, "300.01")

    assert exc.value.message_key == "lending.payment_exceeds_remaining"
    assert exc.value.code == "PAYMENT_EXCEEDS_REMAINING"
    assert lending.remaining_amount == Decimal("300.00")
    assert ledger.current_balance(db_session, user.id) == Decimal("700.00")


def test_repayment_credit_is_a_lending_return(db_session, user, lend):
    lending = lend()

    _repay(db_session, lending, user, "50.00")

    page = ledger.list_transactions(db_session, user.id, source=LedgerSource.LENDING_RETURN)
    assert page.total == 1
    assert page.items[0].description == "Payment from Sam"
    assert page.items[0].lending_id == lending.id


def test_repayment_can_skip_the_balance(db_session, user, lend):
    lending = lend()

    _repay(db_session, lending, user, "50.00", add_to_balance=False)

    assert ledger.current_balance(db_session, user.id) == Decimal("700.00")


def test_forgiven_lending_stays_forgiven(db_session, user, lend):
    lending = lend()
    payment = _repay(db_session, lending, user, "100.00")

    lending_service.forgive(db_session, lending.id, user.id)
    assert lending.status == LendingStatus.FORGIVEN
    assert lending.remaining_amount == Decimal("0.00")

    lending_service.delete_payment(db_session, lending.id, payment.id, user.id)
    assert lending.status == LendingStatus.FORGIVEN
    lending_service.update_lending(db_session, lending.id, user.id, {"notes": "Gift"})
    assert lending.status == LendingStatus.FORGIVEN


def test_deleting_a_payment_restores_remaining_but_keeps_ledger(db_session, user, lend):
    lending = lend()
    payment = _repay(db_session, lending, user, "100.00")

    lending_service.delete_payment(db_session, lending.id, payment.id, user.id)

    assert lending.remaining_amount == Decimal("300.00")
    assert lending.status == LendingStatus.PENDING
    assert lending.payments == []
    assert ledger.current_balance(db_session, user.id) == Decimal("800.00")


def test_deleting_a_payment_of_another_lending_is_rejected(db_session, user, lend):
    first = lend()
    second = lend(borrower_name="Alex")
    payment = _repay(db_session, second, user, "10.00")

    with pytest.raises(DomainConflict) as exc:
        lending_service.delete_payment(db_session, first.id, payment.id, user.id)
    assert exc.value.code == "PAYMENT_MISMATCH"

    with pytest.raises(NotFoundError):
        lending_service.delete_payment(db_session, first.id, 9999, user.id)


def test_amount_update_keeps_received_money(db_session, user, lend):
    lending = lend()
    _repay(db_session, lending, user, "100.00")

    lending_service.update_lending(db_session, lending.id, user.id, {"amount": "500.00"})
    assert lending.remaining_amount == Decimal("400.00")
    assert lending.status == LendingStatus.PARTIAL

    lending_service.update_lending(db_session, lending.id, user.id, {"amount": "80.00"})
    assert lending.remaining_amount == Decimal("0.00")
    assert lending.status == LendingStatus.PAID


def test_return_date_before_lending_date_is_invalid(db_session, user, lend):
    lending = lend()

    with pytest.raises(ValidationError) as exc:
        lending_service.update_lending(
            db_session, lending.id, user.id, {"expected_return_date": date(2024, 3, 1)}
        )

    assert "expected_return_date" in exc.value.errors


def test_forgiven_lending_locks_amount_status_and_payments(db_session, user, lend):
    lending = lend(amount="100.00")
    _repay(db_session, lending, user, "40.00")
    lending_service.forgive(db_session, lending.id, user.id)

    for changes in ({"amount": "300.00"}, {"status": "pending"}):
        with pytest.raises(DomainConflict) as exc:
            lending_service.update_lending(db_session, lending.id, user.id, changes)
        assert exc.value.code == "LENDING_FORGIVEN"
    with pytest.raises(DomainConflict) as exc:
        _repay(db_session, lending, user, "1.00")
    assert exc.value.code == "LENDING_FORGIVEN"

    assert lending.status == LendingStatus.FORGIVEN
    assert lending.amount == Decimal("100.00")
    assert lending.remaining_amount == Decimal("0.00")


def test_explicit_status_must_match_the_amounts(db_session, user, lend):
    lending = lend(amount="100.00")
    _repay(db_session, lending, user, "40.00")

    with pytest.raises(ValidationError) as exc:
        lending_service.update_lending(
            db_session, lending.id, user.id, {"status": "pending", "amount": "300.00"}
        )

    assert "status" in exc.value.errors
    assert lending.amount == Decimal("100.00")
    assert lending.status == LendingStatus.PARTIAL

    lending_service.update_lending(
        db_session, lending.id, user.id, {"status": "partial", "amount": "300.00"}
    )
    assert lending.remaining_amount == Decimal("260.00")

    lending_service.update_lending(db_session, lending.id, user.id, {"status": "forgiven"})
    assert lending.status == LendingStatus.FORGIVEN
    assert lending.remaining_amount == Decimal("0.00")


def test_update_rejects_unknown_fields(db_session, user, lend):
    lending = lend()

    with pytest.raises(ValidationError) as exc:
        lending_service.update_lending(db_session, lending.id, user.id, {"remaining_amount": "0"})

    assert list(exc.value.errors) == ["remaining_amount"]


def test_delete_refunds_the_original_amount(db_session, user, lend):
    lending = lend()
    _repay(db_session, lending, user, "100.00")

    lending_service.delete_lending(db_session, lending.id, user.id)

    assert ledger.current_balance(db_session, user.id) == Decimal("1100.00")
    last = ledger.list_transactions(db_session, user.id).items[0]
    assert last.source == LedgerSource.REFUND
    assert last.description == "Lending to Sam cancelled"
    assert lending_service.list_lendings(db_session, user.id) == []


def test_summary_counts_open_amounts_and_overdue(db_session, user, lend):
    overdue = lend(expected_return_date=date(2024, 5, 1))
    forgiven = lend(amount="50.00", borrower_name="Alex")
    _repay(db_session, overdue, user, "100.00")
    lending_service.forgive(db_session, forgiven.id, user.id)

    result = lending_service.summary(db_session, user.id, today=date(2024, 6, 1))

    assert result.total_lent == Decimal("350.00")
    assert result.total_pending == Decimal("200.00")
    assert result.total_received == Decimal("150.00")
    assert result.overdue_count == 1
