"""Form for crediting the balance."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...forms import Form
from ...models.balance import CREDIT_SOURCES

MAX_AMOUNT = Decimal("999999999.99")


@dataclass(slots=True)
class AddMoneyForm(Form):
    amount: Optional[Decimal] = None
    source: Optional[str] = None
    description: Optional[str] = None

    def clean(self) -> None:
        self.amount = self._money("amount", maximum=MAX_AMOUNT)
        self.source = self._choice(
            "source", [source.value for source in CREDIT_SOURCES], required=True
        )
        self.description = self._text("description", max_length=255)
