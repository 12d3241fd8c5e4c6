"""Lending and lending-payment forms."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar, Optional

from ...forms import Form
from ...models.lending import LENDING_PAYMENT_METHODS, LendingStatus

MAX_AMOUNT = Decimal("999999999.99")
CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")


@dataclass(slots=True)
class LendingForm(Form):
    FIELDS: ClassVar[tuple[str, ...]] = (
        "borrower_name",
        "borrower_phone",
        "borrower_email",
        "amount",
        "currency",
        "description",
        "lending_date",
        "expected_return_date",
        "status",
        "notes",
    )

    borrower_name: Optional[str] = None
    borrower_phone: Optional[str] = None
    borrower_email: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    lending_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    deduct_from_balance: bool = True

    def clean(self) -> None:
        if self._wants("borrower_name"):
            self.borrower_name = self._text("borrower_name", required=True, max_length=255)
        if self.has("borrower_phone"):
            self.borrower_phone = self._text("borrower_phone", max_length=50)
        if self.has("borrower_email"):
            self.borrower_email = self._email("borrower_email")
        if self._wants("amount"):
            self.amount = self._money("amount", maximum=MAX_AMOUNT)
        if self._wants("currency"):
            value = self._text("currency", required=self.partial)
            if value is not None and not CURRENCY_RE.match(value):
                self._add_error("currency", "Currency must be a 3-letter code.")
            self.currency = value.upper() if value else "USD"
        if self.has("description"):
            self.description = self._text("description", max_length=1000)
        if self._wants("lending_date"):
            self.lending_date = self._date("lending_date")
        if self.has("expected_return_date"):
            self.expected_return_date = self._date("expected_return_date", required=False)
        if self.has("notes"):
            self.notes = self._text("notes", max_length=2000)
        if self.partial and self.has("status"):
            self.status = self._choice(
                "status", [status.value for status in LendingStatus], required=True
            )
        if not self.partial:
            self.deduct_from_balance = self._bool("deduct_from_balance", default=True)

        if (
            self.lending_date
            and self.expected_return_date
            and self.expected_return_date < self.lending_date
        ):
            self._add_error(
                "expected_return_date", "Expected return date must be on or after the lending date."
            )


@dataclass(slots=True)
class LendingPaymentForm(Form):
    amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    add_to_balance: bool = True

    def clean(self) -> None:
        self.amount = self._money("amount", maximum=MAX_AMOUNT)
        self.payment_date = self._date("payment_date")
        self.payment_method = self._choice(
            "payment_method", LENDING_PAYMENT_METHODS, default="cash"
        )
        self.notes = self._text("notes", max_length=1000)
        self.add_to_balance = self._bool("add_to_balance", default=True)
