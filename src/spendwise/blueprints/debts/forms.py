"""Debt and debt-payment forms."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar, Optional

from ...forms import Form
from ...models.debt import DEBT_PAYMENT_METHODS, DEBT_PAYMENT_TYPES, DEBT_PRIORITIES, DebtStatus

MAX_AMOUNT = Decimal("999999999.99")


@dataclass(slots=True)
class DebtForm(Form):
    """Create or partially update a debt; ``status`` is only accepted on update."""

    FIELDS: ClassVar[tuple[str, ...]] = (
        "debtor_name",
        "debtor_phone",
        "debtor_email",
        "total_amount",
        "priority",
        "payment_type",
        "installment_amount",
        "due_date",
        "start_date",
        "status",
        "notes",
    )

    debtor_name: Optional[str] = None
    debtor_phone: Optional[str] = None
    debtor_email: Optional[str] = None
    total_amount: Optional[Decimal] = None
    priority: Optional[str] = None
    payment_type: Optional[str] = None
    installment_amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    start_date: Optional[date] = None
    status: Optional[DebtStatus] = None
    notes: Optional[str] = None

    def clean(self) -> None:
        if self._wants("debtor_name"):
            self.debtor_name = self._text("debtor_name", required=True, max_length=255)
        if self.has("debtor_phone"):
            self.debtor_phone = self._text("debtor_phone", max_length=50)
        if self.has("debtor_email"):
            self.debtor_email = self._email("debtor_email")
        if self._wants("total_amount"):
            self.total_amount = self._money("total_amount", maximum=MAX_AMOUNT)
        if self._wants("priority"):
            self.priority = self._choice("priority", DEBT_PRIORITIES, default="3")
        if self._wants("payment_type"):
            self.payment_type = self._choice(
                "payment_type", DEBT_PAYMENT_TYPES, default="one_time"
            )
        if self.has("installment_amount"):
            self.installment_amount = self._money(
                "installment_amount", required=False, maximum=MAX_AMOUNT
            )
        if self.has("due_date"):
            self.due_date = self._date("due_date", required=False)
        if self.has("start_date"):
            self.start_date = self._date("start_date", required=False)
        if self.has("notes"):
            self.notes = self._text("notes", max_length=2000)
        if self.partial and self.has("status"):
            value = self._choice("status", [status.value for status in DebtStatus], required=True)
            self.status = DebtStatus(value) if value else None

        if self.start_date and self.due_date and self.due_date < self.start_date:
            self._add_error("due_date", "Due date must be on or after the start date.")


@dataclass(slots=True)
class DebtPaymentForm(Form):
    amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    add_to_balance: bool = False

    def clean(self) -> None:
        self.amount = self._money("amount", maximum=MAX_AMOUNT)
        self.payment_date = self._date("payment_date")
        self.payment_method = self._choice("payment_method", DEBT_PAYMENT_METHODS, default="cash")
        self.notes = self._text("notes", max_length=1000)
        self.add_to_balance = self._bool("add_to_balance", default=False)
