"""Dashboard aggregation tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from spendwise.services import dashboard
from spendwise.services import incomes as income_service
from spendwise.services.periods import Month


def test_overview_compares_income_and_spending(db_session, user, category_factory, expense_factory):
    income_service.create_income(
        db_session, user.id, monthly_amount="2000.00", effective_from=date(2024, 1, 1)
    )
    food = category_factory(name="Food")
    rent = category_factory(name="Rent")
    expense_factory(amount="50.00", expense_date=date(2024, 5, 2), category=food)
    expense_factory(amount="25.00", expense_date=date(2024, 5, 2), category=food)
    expense_factory(amount="425.00", expense_date=date(2024, 5, 10), category=rent)
    expense_factory(amount="999.00", expense_date=date(2024, 4, 30), category=rent)

    result = dashboard.overview(db_session, user.id, Month(2024, 5), today=date(2024, 5, 20))

    assert result.monthly_income == Decimal("2000.00")
    assert result.total_expenses == Decimal("500.00")
    assert result.remaining_balance == Decimal("1500.00")
    assert result.spending_percentage == 25.0
    assert result.expense_count == 3
    assert result.top_category.category.name_en == "Rent"
    assert [(row.category.name_en, row.total_amount, row.percentage) for row in result.by_category] == [
        ("Rent", Decimal("425.00"), 85.0),
        ("Food", Decimal("75.00"), 15.0),
    ]
    assert [(day.day, day.amount) for day in result.daily] == [
        (date(2024, 5, 2), Decimal("75.00")),
        (date(2024, 5, 10), Decimal("425.00")),
    ]


def test_overview_without_income_or_expenses(db_session, user):
    result = dashboard.overview(db_session, user.id, Month(2024, 5), today=date(2024, 5, 20))

    assert result.monthly_income == Decimal("0.00")
    assert result.spending_percentage == 0.0
    assert result.top_category is None
    assert result.daily == []


def test_current_income_is_latest_effective_record(db_session, user):
    income_service.create_income(
        db_session, user.id, monthly_amount="1000.00", effective_from=date(2024, 1, 1)
    )
    income_service.create_income(
        db_session, user.id, monthly_amount="1500.00", effective_from=date(2024, 6, 1)
    )

    assert income_service.current_income(db_session, user.id, date(2024, 5, 31)).monthly_amount == Decimal("1000.00")
    assert income_service.current_income(db_session, user.id, date(2024, 6, 1)).monthly_amount == Decimal("1500.00")
    assert income_service.current_income(db_session, user.id, date(2023, 12, 31)) is None


def test_trends_walk_back_month_by_month(db_session, user, expense_factory):
    income_service.create_income(
        db_session, user.id, monthly_amount="1000.00", effective_from=date(2024, 3, 1)
    )
    expense_factory(amount="100.00", expense_date=date(2024, 2, 14))
    expense_factory(amount="300.00", expense_date=date(2024, 4, 1))

    points = dashboard.trends(db_session, user.id, limit=3, today=date(2024, 4, 15))

    assert [point.month.label() for point in points] == ["2024-02", "2024-03", "2024-04"]
    assert [point.income for point in points] == [
        Decimal("0.00"),
        Decimal("1000.00"),
        Decimal("1000.00"),
    ]
    assert [point.savings for point in points] == [
        Decimal("-100.00"),
        Decimal("1000.00"),
        Decimal("700.00"),
    ]


def test_trends_limit_is_clamped(db_session, user):
    points = dashboard.trends(db_session, user.id, limit=50, today=date(2024, 12, 1))

    assert len(points) == dashboard.MAX_TREND_LIMIT
    assert points[0].month == Month(2024, 1)


def test_category_breakdown_totals(db_session, user, expense_factory):
    expense_factory(amount="10.00", expense_date=date(2024, 7, 1))
    expense_factory(amount="30.00", expense_date=date(2024, 7, 9))

    breakdown = dashboard.category_breakdown(db_session, user.id, Month(2024, 7))

    assert breakdown.total == Decimal("40.00")
    assert len(breakdown.categories) == 1
    assert breakdown.categories[0].expense_count == 2
    assert breakdown.categories[0].percentage == 100.0


def test_month_helpers():
    assert Month.parse("2024-02").days == 29
    assert Month(2024, 1).shift(-1) == Month(2023, 12)
    assert Month(2024, 12).shift(1).label() == "2025-01"
    assert Month(2024, 3).display_name() == "Mar 2024"
