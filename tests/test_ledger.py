"""Balance ledger tests: running total, balance_after and money movements."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlmodel import select

from spendwise.errors import DomainConflict, ValidationError
from spendwise.models import BalanceTransaction, LedgerSource, TransactionType
from spendwise.models.target import Target, TargetStatus
from spendwise.services import expenses as expense_service
from spendwise.services import ledger
from spendwise.services.pagination import Pagination


def _entries(session, user_id):
    return list(
        session.exec(
            select(BalanceTransaction)
            .where(BalanceTransaction.user_id == user_id)
            .order_by(BalanceTransaction.id)
        ).all()
    )


def test_balance_is_created_lazily_at_zero(db_session, user):
    assert not ledger.has_balance(db_session, user.id)
    assert ledger.current_balance(db_session, user.id) == Decimal("0.00")

    balance = ledger.get_or_create_balance(db_session, user.id)

    assert balance.current_balance == Decimal("0.00")
    assert ledger.has_balance(db_session, user.id)


def test_salary_then_expense_scenario(db_session, user, fund, category_factory):
    """500 -> +200 salary -> -50 expense leaves 650 with two matching entries."""

    fund("500.00")
    credit = ledger.credit(db_session, user.id, "200.00", "salary")

    assert credit.type == TransactionType.CREDIT
    assert credit.balance_after == Decimal("700.00")
    assert ledger.current_balance(db_session, user.id) == Decimal("700.00")

    category = category_factory()
    expense = expense_service.create_expense(
        db_session,
        user.id,
        category_id=category.id,
        amount="50.00",
        expense_date=date(2024, 5, 2),
    )

    assert ledger.current_balance(db_session, user.id) == Decimal("650.00")
    debit = _entries(db_session, user.id)[-1]
    assert debit.type == TransactionType.DEBIT
    assert debit.source == LedgerSource.EXPENSE
    assert debit.expense_id == expense.id
    assert debit.balance_after == Decimal("650.00")


def test_every_entry_records_the_running_total(db_session, user, fund):
    fund("100.00")
    ledger.debit(db_session, user.id, "30.25")
    ledger.refund(db_session, user.id, "10.10")
    ledger.debit(db_session, user.id, "200.00")

    running = Decimal("0.00")
    for entry in _entries(db_session, user.id):
        running += entry.signed_amount
        assert entry.balance_after == running
    assert running == Decimal("-120.15")

    check = ledger.verify_ledger(db_session, user.id)
    assert check.consistent
    assert check.entries == 4
    assert check.stored == Decimal("-120.15")


def test_repeated_cents_do_not_drift(db_session, user):
    for _ in range(100):
        ledger.credit(db_session, user.id, "0.10", "gift")

    assert ledger.current_balance(db_session, user.id) == Decimal("10.00")


@pytest.mark.parametrize("amount", ["0", "-5", "0.00"])
def test_non_positive_amounts_are_rejected(db_session, user, amount):
    with pytest.raises(ValidationError) as exc:
        ledger.credit(db_session, user.id, amount, "salary")

    assert "amount" in exc.value.errors
    assert _entries(db_session, user.id) == []


def test_non_numeric_amount_is_rejected(db_session, user):
    with pytest.raises(ValidationError):
        ledger.debit(db_session, user.id, "twelve")


def test_unknown_credit_source_is_rejected(db_session, user):
    with pytest.raises(ValidationError) as exc:
        ledger.credit(db_session, user.id, "10.00", "lottery")

    assert "source" in exc.value.errors


def test_only_own_reference_columns_are_filled(db_session, user):
    entry = ledger.deduct_for_lending(
        db_session, user.id, "40.00", lending_id=7, borrower_name="Sam"
    )

    assert entry.lending_id == 7
    assert entry.expense_id is None
    assert entry.debt_id is None
    assert entry.target_id is None
    assert entry.description == "Lent to Sam"
    assert entry.source == LedgerSource.LENDING


def test_long_descriptions_are_clipped(db_session, user):
    entry = ledger.credit(db_session, user.id, "1.00", "other", description="x" * 400)

    assert len(entry.description) == 255


def test_list_transactions_is_newest_first_and_paginated(db_session, user, fund):
    for amount in ("1.00", "2.00", "3.00"):
        fund(amount)
    ledger.debit(db_session, user.id, "0.50")

    page = ledger.list_transactions(db_session, user.id, pagination=Pagination(page=1, per_page=2))

    assert page.total == 4
    assert page.last_page == 2
    assert [entry.amount for entry in page.items] == [Decimal("0.50"), Decimal("3.00")]

    credits = ledger.list_transactions(db_session, user.id, tx_type=TransactionType.CREDIT)
    assert credits.total == 3
    assert credits.meta() == {"current_page": 1, "last_page": 1, "per_page": 15, "total": 3}


def test_credit_sources_exclude_system_sources():
    sources = {source.value for source in ledger.credit_sources()}

    assert sources == {"salary", "freelance", "gift", "investment", "refund", "transfer", "other"}


def _target(session, user, price="300.00", status=TargetStatus.ACTIVE):
    target = Target(user_id=user.id, name="Bike", target_amount=Decimal(price), status=status)
    session.add(target)
    session.flush()
    return target


def test_purchase_target_debits_and_completes(db_session, user, fund):
    fund("500.00")
    target = _target(db_session, user)

    entry = ledger.purchase_target(db_session, target)

    assert entry.source == LedgerSource.TARGET
    assert entry.type == TransactionType.DEBIT
    assert entry.target_id == target.id
    assert entry.description == "Purchased target: Bike"
    assert entry.balance_after == Decimal("200.00")
    assert target.status == TargetStatus.COMPLETED
    assert target.completed_at is not None


def test_purchase_target_with_insufficient_balance_changes_nothing(db_session, user, fund):
    fund("100.00")
    target = _target(db_session, user)

    with pytest.raises(DomainConflict) as exc:
        ledger.purchase_target(db_session, target)

    assert exc.value.code == "INSUFFICIENT_BALANCE"
    assert exc.value.status_code == 400
    assert target.status == TargetStatus.ACTIVE
    assert ledger.current_balance(db_session, user.id) == Decimal("100.00")
    assert len(_entries(db_session, user.id)) == 1


def test_completed_target_cannot_be_purchased_again(db_session, user, fund):
    fund("1000.00")
    target = _target(db_session, user, status=TargetStatus.COMPLETED)

    with pytest.raises(DomainConflict) as exc:
        ledger.purchase_target(db_session, target)

    assert exc.value.code == "TARGET_NOT_ACTIVE"
    assert exc.value.status_code == 409


def test_debits_may_drive_the_balance_negative(db_session, user, fund, expense_factory):
    fund("20.00")

    expense = expense_factory(amount="50.00")

    entry = _entries(db_session, user.id)[-1]
    assert entry.expense_id == expense.id
    assert entry.balance_after == Decimal("-30.00")
    assert ledger.current_balance(db_session, user.id) == Decimal("-30.00")


def test_debit_from_an_empty_balance(db_session, user):
    entry = ledger.debit(db_session, user.id, "12.50")

    assert entry.balance_after == Decimal("-12.50")
    assert ledger.current_balance(db_session, user.id) == Decimal("-12.50")
