"""SQLModel implementation of the Expense repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.expense import Expense

SORT_COLUMNS = {
    "date": Expense.expense_date,
    "amount": Expense.amount,
    "created_at": Expense.created_at,
}


class SQLModelExpenseRepository:
    """Session-bound expense repository; soft-deleted rows are hidden."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        statement = (
            select(Expense)
            .where(Expense.id == expense_id)
            .where(Expense.deleted_at.is_(None))  # type: ignore
        )
        return self.session.exec(statement).first()

    def _filtered(self, statement, user_id, category_id, date_from, date_to, text):
        statement = statement.where(Expense.user_id == user_id).where(
            Expense.deleted_at.is_(None)  # type: ignore
        )
        if category_id is not None:
            statement = statement.where(Expense.category_id == category_id)
        if date_from is not None:
            statement = statement.where(Expense.expense_date >= date_from)
        if date_to is not None:
            statement = statement.where(Expense.expense_date <= date_to)
        if text:
            statement = statement.where(Expense.note.contains(text))  # type: ignore
        return statement

    def search(
        self,
        user_id: int,
        *,
        category_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        text: Optional[str] = None,
        sort_by: str = "date",
        descending: bool = True,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Expense]:
        statement = self._filtered(select(Expense), user_id, category_id, date_from, date_to, text)
        column = SORT_COLUMNS.get(sort_by, Expense.expense_date)
        if descending:
            statement = statement.order_by(column.desc(), Expense.id.desc())  # type: ignore
        else:
            statement = statement.order_by(column.asc(), Expense.id.asc())  # type: ignore
        if offset:
            statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        return list(self.session.exec(statement).unique().all())

    def count(
        self,
        user_id: int,
        *,
        category_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        text: Optional[str] = None,
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(Expense),
            user_id,
            category_id,
            date_from,
            date_to,
            text,
        )
        return int(self.session.exec(statement).one())

    def save(self, expense: Expense) -> Expense:
        self.session.add(expense)
        self.session.flush()
        return expense

    def count_for_category(self, category_id: int, *, include_deleted: bool = True) -> int:
        statement = select(func.count()).select_from(Expense).where(
            Expense.category_id == category_id
        )
        if not include_deleted:
            statement = statement.where(Expense.deleted_at.is_(None))  # type: ignore
        return int(self.session.exec(statement).one())
