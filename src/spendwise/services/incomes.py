"""Monthly income records and "current income" resolution."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlmodel import Session, select

from ..models.income import Income
from ..money import to_money
from .access import get_owned

UNSET: Any = object()


def income_history(session: Session, user_id: int) -> list[Income]:
    """All records, latest effective date first."""

    statement = (
        select(Income)
        .where(Income.user_id == user_id)
        .order_by(Income.effective_from.desc(), Income.id.desc())  # type: ignore
    )
    return list(session.exec(statement).all())


def income_as_of(session: Session, user_id: int, as_of: date) -> Optional[Income]:
    """Latest income whose ``effective_from`` is on or before ``as_of``."""

    statement = (
        select(Income)
        .where(Income.user_id == user_id)
        .where(Income.effective_from <= as_of)
        .order_by(Income.effective_from.desc(), Income.id.desc())  # type: ignore
        .limit(1)
    )
    return session.exec(statement).first()


def current_income(session: Session, user_id: int, today: Optional[date] = None) -> Optional[Income]:
    return income_as_of(session, user_id, today or date.today())


def monthly_income_amount(income: Optional[Income]) -> Decimal:
    return income.monthly_amount if income is not None else Decimal("0.00")


def get_income(session: Session, income_id: int, user_id: int) -> Income:
    return get_owned(session, Income, income_id, user_id, resource="income")


def create_income(
    session: Session, user_id: int, *, monthly_amount: Any, effective_from: date
) -> Income:
    income = Income(
        user_id=user_id,
        monthly_amount=to_money(monthly_amount),
        effective_from=effective_from,
    )
    session.add(income)
    session.flush()
    return income


def update_income(
    session: Session,
    income_id: int,
    user_id: int,
    *,
    monthly_amount: Any = UNSET,
    effective_from: Any = UNSET,
) -> Income:
    income = get_income(session, income_id, user_id)
    if monthly_amount is not UNSET:
        income.monthly_amount = to_money(monthly_amount)
    if effective_from is not UNSET:
        income.effective_from = effective_from
    income.updated_at = datetime.now(timezone.utc)
    session.add(income)
    session.flush()
    return income


def delete_income(session: Session, income_id: int, user_id: int) -> None:
    session.delete(get_income(session, income_id, user_id))
    session.flush()
