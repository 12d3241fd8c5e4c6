"""Decimal money helpers and request-form parsing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendwise.blueprints.balance.forms import AddMoneyForm
from spendwise.blueprints.categories.forms import CategoryForm
from spendwise.blueprints.debts.forms import DebtForm
from spendwise.blueprints.expenses.forms import ExpenseForm
from spendwise.blueprints.lendings.forms import LendingForm
from spendwise.errors import ValidationError
from spendwise.forms import query_int
from spendwise.money import format_money, format_rate, percentage, to_money


def test_to_money_quantizes_half_up():
    assert to_money("2.345") == Decimal("2.35")
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(None) == Decimal("0.00")


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True])
def test_to_money_rejects_non_amounts(value):
    with pytest.raises(ValueError):
        to_money(value)


def test_formatting():
    assert format_money(Decimal("5")) == "5.00"
    assert format_money(None) is None
    assert format_rate("3.75") == "3.750000"
    assert percentage("1", "3") == 33.33
    assert percentage("5", "0") == 0.0


def test_expense_form_collects_every_error():
    form = ExpenseForm.from_mapping({"amount": "abc", "date": "05/02/2024"})

    assert not form.validate()
    assert set(form.errors) == {"category_id", "amount", "date"}


def test_expense_form_partial_only_reports_present_fields():
    form = ExpenseForm.from_mapping({"date": "2024-05-02"}, partial=True).validated()

    assert form.service_kwargs() == {"expense_date": date(2024, 5, 2)}


def test_validated_raises_with_field_errors():
    with pytest.raises(ValidationError) as exc:
        AddMoneyForm.from_mapping({"amount": "10", "source": "expense"}).validated()

    assert list(exc.value.errors) == ["source"]


def test_add_money_form_caps_the_amount():
    form = AddMoneyForm.from_mapping({"amount": "1000000000", "source": "salary"})

    assert not form.validate()
    assert "amount" in form.errors


def test_category_form_requires_hex_color():
    form = CategoryForm.from_mapping({"name": "Pets", "icon": "paw", "color": "red"})

    assert not form.validate()
    assert "color" in form.errors


def test_debt_form_ignores_status_on_create_and_checks_dates():
    form = DebtForm.from_mapping(
        {
            "debtor_name": "Jordan",
            "total_amount": "100",
            "status": "completed",
            "start_date": "2024-05-01",
            "due_date": "2024-04-01",
        }
    )

    assert not form.validate()
    assert form.status is None
    assert "due_date" in form.errors


def test_lending_form_defaults_and_normalizes_currency():
    form = LendingForm.from_mapping(
        {"borrower_name": "Sam", "amount": "20", "lending_date": "2024-04-01", "currency": "jod"}
    ).validated()

    assert form.currency == "JOD"
    assert form.deduct_from_balance is True

    bare = LendingForm.from_mapping(
        {
            "borrower_name": "Sam",
            "amount": "20",
            "lending_date": "2024-04-01",
            "deduct_from_balance": "false",
        }
    ).validated()
    assert bare.currency == "USD"
    assert bare.deduct_from_balance is False


def test_query_int_clamps_and_falls_back():
    assert query_int({"limit": "500"}, "limit", 20) == 100
    assert query_int({"limit": "0"}, "limit", 20) == 1
    assert query_int({"limit": "many"}, "limit", 20) == 20
    assert query_int({}, "limit", 20) == 20
