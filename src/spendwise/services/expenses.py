"""Expense lifecycle; every amount change flows through the ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from math import ceil
from typing import Any, Optional

from sqlmodel import Session

from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..infra.repositories import SQLModelExpenseRepository
from ..logging_config import get_logger
from ..models.category import Category
from ..models.expense import Expense
from ..money import TWO_PLACES, to_money
from . import ledger
from .access import get_owned
from .categories import get_visible_category
from .periods import Month

logger = get_logger("services.expenses")

UNSET: Any = object()
SORTABLE_FIELDS = ("date", "amount", "created_at")


@dataclass(slots=True)
class ExpenseFilters:
    """Filter + sort options for expense listings."""

    category_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None
    sort_by: str = "date"
    sort_order: str = "desc"


@dataclass(frozen=True, slots=True)
class ExpensePage:
    items: list[Expense]
    page: int
    per_page: int
    total: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.per_page) if self.total else 0


@dataclass(frozen=True, slots=True)
class ExpenseSummary:
    month: Month
    total_expenses: Decimal
    expense_count: int
    average_per_day: Decimal


def _category_for(session: Session, category_id: int, user_id: int) -> Category:
    try:
        return get_visible_category(session, category_id, user_id)
    except (NotFoundError, AuthorizationError) as exc:
        raise ValidationError({"category_id": ["Category does not exist."]}) from exc


def get_expense(session: Session, expense_id: int, user_id: int) -> Expense:
    return get_owned(
        session,
        Expense,
        expense_id,
        user_id,
        resource="expense",
        loader=SQLModelExpenseRepository(session).get_by_id,
    )


def create_expense(
    session: Session,
    user_id: int,
    *,
    category_id: int,
    amount: Any,
    expense_date: date,
    note: Optional[str] = None,
) -> Expense:
    """Persist the expense, then debit its amount from the balance."""

    category = _category_for(session, category_id, user_id)
    expense = Expense(
        user_id=user_id,
        category_id=category.id,
        amount=to_money(amount),
        expense_date=expense_date,
        note=note,
    )
    SQLModelExpenseRepository(session).save(expense)
    ledger.debit(
        session,
        user_id,
        expense.amount,
        expense_id=expense.id,
        description=note or category.name_en or "Expense",
    )
    logger.info("Expense created", extra={"user_id": user_id, "expense_id": expense.id})
    return expense


def update_expense(
    session: Session,
    expense_id: int,
    user_id: int,
    *,
    category_id: Any = UNSET,
    amount: Any = UNSET,
    expense_date: Any = UNSET,
    note: Any = UNSET,
) -> Expense:
    """Apply changes and settle the amount delta (debit if larger, refund if smaller)."""

    expense = get_expense(session, expense_id, user_id)
    old_amount = expense.amount
    category = expense.category

    if category_id is not UNSET:
        category = _category_for(session, category_id, user_id)
        expense.category_id = category.id
        expense.category = category
    if amount is not UNSET:
        expense.amount = to_money(amount)
    if expense_date is not UNSET:
        expense.expense_date = expense_date
    if note is not UNSET:
        expense.note = note
    expense.updated_at = datetime.now(timezone.utc)
    SQLModelExpenseRepository(session).save(expense)

    delta = expense.amount - old_amount
    description = f"Updated: {category.name_en}"
    if delta > 0:
        ledger.debit(session, user_id, delta, expense_id=expense.id, description=description)
    elif delta < 0:
        ledger.refund(session, user_id, -delta, expense_id=expense.id, description=description)
    return expense


def delete_expense(session: Session, expense_id: int, user_id: int) -> None:
    """Refund the amount, then soft-delete the expense."""

    expense = get_expense(session, expense_id, user_id)
    ledger.refund(
        session,
        user_id,
        expense.amount,
        expense_id=expense.id,
        description=f"Deleted: {expense.category.name_en}",
    )
    expense.deleted_at = datetime.now(timezone.utc)
    SQLModelExpenseRepository(session).save(expense)
    logger.info("Expense deleted", extra={"user_id": user_id, "expense_id": expense_id})


def list_expenses(
    session: Session,
    user_id: int,
    *,
    filters: ExpenseFilters | None = None,
    page: int = 1,
    per_page: int = 20,
) -> ExpensePage:
    filters = filters or ExpenseFilters()
    page = max(1, page)
    per_page = max(1, min(per_page, 100))
    repo = SQLModelExpenseRepository(session)
    criteria = dict(
        category_id=filters.category_id,
        date_from=filters.date_from,
        date_to=filters.date_to,
        text=filters.search,
    )
    total = repo.count(user_id, **criteria)
    items = repo.search(
        user_id,
        **criteria,
        sort_by=filters.sort_by if filters.sort_by in SORTABLE_FIELDS else "date",
        descending=filters.sort_order.lower() != "asc",
        limit=per_page,
        offset=(page - 1) * per_page,
    )
    return ExpensePage(items=items, page=page, per_page=per_page, total=total)


def expenses_in_month(session: Session, user_id: int, month: Month) -> list[Expense]:
    return SQLModelExpenseRepository(session).search(
        user_id,
        date_from=month.first_day,
        date_to=month.last_day,
        sort_by="date",
        descending=False,
    )


def monthly_summary(session: Session, user_id: int, month: Month) -> ExpenseSummary:
    expenses = expenses_in_month(session, user_id, month)
    total = sum((expense.amount for expense in expenses), Decimal("0.00"))
    average = (total / month.days).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return ExpenseSummary(
        month=month,
        total_expenses=total,
        expense_count=len(expenses),
        average_per_day=average,
    )
