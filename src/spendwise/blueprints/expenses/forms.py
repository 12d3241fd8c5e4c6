"""Expense form: create and partial update share one definition."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Optional

from ...forms import Form

MAX_AMOUNT = Decimal("999999999.99")


@dataclass(slots=True)
class ExpenseForm(Form):
    FIELDS: ClassVar[tuple[str, ...]] = ("category_id", "amount", "date", "note")

    category_id: Optional[int] = None
    amount: Optional[Decimal] = None
    date: Optional[date] = None
    note: Optional[str] = None

    def clean(self) -> None:
        if self._wants("category_id"):
            self.category_id = self._int("category_id", required=True)
        if self._wants("amount"):
            self.amount = self._money("amount", maximum=MAX_AMOUNT)
        if self._wants("date"):
            self.date = self._date("date")
        if self._wants("note"):
            self.note = self._text("note", max_length=1000)

    def service_kwargs(self) -> dict[str, Any]:
        """Changed fields keyed by the service's argument names."""

        changes = self.changes()
        if "date" in changes:
            changes["expense_date"] = changes.pop("date")
        return changes
