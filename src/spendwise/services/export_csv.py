"""CSV export of expenses plus the export audit trail."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..errors import DomainConflict
from ..infra.repositories import SQLModelExpenseRepository
from ..logging_config import get_logger
from ..models.expense import Expense
from ..models.export_history import ExportHistory
from ..money import format_money
from .pagination import Page, Pagination

logger = get_logger("services.export")

CSV_HEADERS = ["Date", "Category", "Amount", "Note"]
UNSUPPORTED_FORMATS = ("pdf", "excel")


@dataclass(frozen=True, slots=True)
class ExportResult:
    filename: str
    content: bytes
    history: ExportHistory


def _serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def write_expenses_csv(*, expenses: Iterable[Expense], locale: str = "en") -> str:
    """Render expenses to CSV text with fixed columns: Date, Category, Amount, Note."""

    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer, fieldnames=CSV_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
    )
    writer.writeheader()
    for expense in expenses:
        writer.writerow(
            {
                "Date": _serialize_value(expense.expense_date),
                "Category": expense.category.display_name(locale) if expense.category else "",
                "Amount": format_money(expense.amount),
                "Note": _serialize_value(expense.note),
            }
        )
    return buffer.getvalue()


def export_expenses(
    session: Session,
    user_id: int,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    category_id: Optional[int] = None,
    locale: str = "en",
    now: Optional[datetime] = None,
) -> ExportResult:
    """Build the CSV and record one ExportHistory row.

    The date range applies only when both ends are given.
    """

    now = now or datetime.now(timezone.utc)
    if date_from is None or date_to is None:
        date_from = date_to = None

    expenses = SQLModelExpenseRepository(session).search(
        user_id,
        category_id=category_id,
        date_from=date_from,
        date_to=date_to,
        sort_by="date",
        descending=True,
    )
    content = write_expenses_csv(expenses=expenses, locale=locale).encode("utf-8")

    history = ExportHistory(
        user_id=user_id,
        export_format="csv",
        date_from=date_from,
        date_to=date_to,
        category_id=category_id,
        record_count=len(expenses),
        file_size=len(content),
    )
    session.add(history)
    session.flush()
    logger.info(
        "Expenses exported",
        extra={"user_id": user_id, "records": len(expenses), "export_id": history.id},
    )
    return ExportResult(
        filename=now.strftime("expenses_%Y-%m-%d_%H%M%S.csv"),
        content=content,
        history=history,
    )


def reject_unsupported(export_format: str) -> None:
    raise DomainConflict(
        "error.not_implemented",
        code="NOT_IMPLEMENTED",
        status_code=501,
        params={"format": export_format.upper()},
    )


def export_history(
    session: Session, user_id: int, pagination: Pagination | None = None
) -> Page[ExportHistory]:
    pagination = pagination or Pagination(per_page=20)
    total = session.exec(
        select(func.count()).select_from(ExportHistory).where(ExportHistory.user_id == user_id)
    ).one()
    statement = (
        select(ExportHistory)
        .where(ExportHistory.user_id == user_id)
        .order_by(ExportHistory.created_at.desc(), ExportHistory.id.desc())  # type: ignore
        .offset(pagination.offset)
        .limit(pagination.per_page)
    )
    items = list(session.exec(statement).all())
    return Page(items=items, page=pagination.page, per_page=pagination.per_page, total=int(total))
