"""Read-side aggregations for the dashboard (no writes)."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from sqlmodel import Session

from ..models.category import Category
from ..models.expense import Expense
from ..money import percentage
from .expenses import expenses_in_month
from .incomes import current_income, income_as_of, monthly_income_amount
from .periods import Month

TREND_PERIODS = ("monthly", "weekly", "yearly")
MAX_TREND_LIMIT = 12


@dataclass(slots=True)
class CategorySpend:
    category: Category
    total_amount: Decimal = Decimal("0.00")
    expense_count: int = 0
    percentage: float = 0.0


@dataclass(frozen=True, slots=True)
class DailySpend:
    day: date
    amount: Decimal


@dataclass(frozen=True, slots=True)
class Overview:
    month: Month
    monthly_income: Decimal
    total_expenses: Decimal
    remaining_balance: Decimal
    spending_percentage: float
    expense_count: int
    by_category: list[CategorySpend] = field(default_factory=list)
    daily: list[DailySpend] = field(default_factory=list)

    @property
    def top_category(self) -> Optional[CategorySpend]:
        return self.by_category[0] if self.by_category else None


@dataclass(frozen=True, slots=True)
class TrendPoint:
    month: Month
    income: Decimal
    expenses: Decimal

    @property
    def savings(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True, slots=True)
class Breakdown:
    month: Month
    total: Decimal
    categories: list[CategorySpend]


def _total(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), Decimal("0.00"))


def spending_by_category(expenses: list[Expense]) -> list[CategorySpend]:
    """Group expenses per category, sorted by amount descending."""

    grouped: dict[int, CategorySpend] = {}
    for expense in expenses:
        bucket = grouped.setdefault(expense.category_id, CategorySpend(category=expense.category))
        bucket.total_amount += expense.amount
        bucket.expense_count += 1

    total = _total(expenses)
    rows = sorted(grouped.values(), key=lambda row: (-row.total_amount, row.category.id))
    for row in rows:
        row.percentage = percentage(row.total_amount, total)
    return rows


def daily_spending(expenses: list[Expense]) -> list[DailySpend]:
    days: "OrderedDict[date, Decimal]" = OrderedDict()
    for expense in sorted(expenses, key=lambda item: item.expense_date):
        days[expense.expense_date] = days.get(expense.expense_date, Decimal("0.00")) + expense.amount
    return [DailySpend(day=day, amount=amount) for day, amount in days.items()]


def overview(
    session: Session, user_id: int, month: Month, today: Optional[date] = None
) -> Overview:
    expenses = expenses_in_month(session, user_id, month)
    income = monthly_income_amount(current_income(session, user_id, today))
    total = _total(expenses)
    return Overview(
        month=month,
        monthly_income=income,
        total_expenses=total,
        remaining_balance=income - total,
        spending_percentage=percentage(total, income),
        expense_count=len(expenses),
        by_category=spending_by_category(expenses),
        daily=daily_spending(expenses),
    )


def trends(
    session: Session, user_id: int, *, limit: int = 6, today: Optional[date] = None
) -> list[TrendPoint]:
    """Monthly income vs. expenses for the last ``limit`` months, oldest first."""

    limit = max(1, min(limit, MAX_TREND_LIMIT))
    current = Month.of(today or date.today())
    points: list[TrendPoint] = []
    for offset in range(limit - 1, -1, -1):
        month = current.shift(-offset)
        income = income_as_of(session, user_id, month.last_day)
        points.append(
            TrendPoint(
                month=month,
                income=monthly_income_amount(income),
                expenses=_total(expenses_in_month(session, user_id, month)),
            )
        )
    return points


def category_breakdown(session: Session, user_id: int, month: Month) -> Breakdown:
    expenses = expenses_in_month(session, user_id, month)
    return Breakdown(month=month, total=_total(expenses), categories=spending_by_category(expenses))
