"""Monthly income form."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar, Optional

from ...forms import Form


@dataclass(slots=True)
class IncomeForm(Form):
    FIELDS: ClassVar[tuple[str, ...]] = ("monthly_amount", "effective_from")

    monthly_amount: Optional[Decimal] = None
    effective_from: Optional[date] = None

    def clean(self) -> None:
        if self._wants("monthly_amount"):
            self.monthly_amount = self._money("monthly_amount", minimum=Decimal("0"))
        if self._wants("effective_from"):
            self.effective_from = self._date("effective_from")
