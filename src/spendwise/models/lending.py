"""Money the user lent out, and repayments received from borrowers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class LendingStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    FORGIVEN = "forgiven"


# Statuses whose remaining amount is still expected back.
OPEN_LENDING_STATUSES: tuple[LendingStatus, ...] = (LendingStatus.PENDING, LendingStatus.PARTIAL)
LENDING_PAYMENT_METHODS: tuple[str, ...] = ("cash", "bank_transfer", "mobile_payment", "check", "other")


def status_for_amounts(amount: Decimal, remaining: Decimal) -> LendingStatus:
    if remaining <= 0:
        return LendingStatus.PAID
    if remaining < amount:
        return LendingStatus.PARTIAL
    return LendingStatus.PENDING


class Lending(SQLModel, table=True):
    """A loan from the user to a borrower."""

    __tablename__: ClassVar[str] = "lending"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    borrower_name: str = Field(nullable=False, max_length=255)
    borrower_phone: Optional[str] = Field(default=None, max_length=50)
    borrower_email: Optional[str] = Field(default=None, max_length=255)
    amount: Decimal = Field(max_digits=15, decimal_places=2)
    remaining_amount: Decimal = Field(max_digits=15, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)
    description: Optional[str] = Field(default=None, max_length=1000)
    lending_date: date = Field(nullable=False, index=True)
    expected_return_date: Optional[date] = Field(default=None)
    status: LendingStatus = Field(default=LendingStatus.PENDING, nullable=False, index=True)
    notes: Optional[str] = Field(default=None, max_length=2000)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    payments: list["LendingPayment"] = Relationship(
        back_populates="lending",
        sa_relationship=relationship(
            "LendingPayment",
            back_populates="lending",
            cascade="all, delete-orphan",
            order_by="LendingPayment.payment_date.desc()",
        ),
    )

    @property
    def total_received(self) -> Decimal:
        return self.amount - self.remaining_amount

    def derive_status(self) -> LendingStatus:
        """Status implied by the amounts; ``forgiven`` is terminal and never re-derived."""

        if self.status == LendingStatus.FORGIVEN:
            return LendingStatus.FORGIVEN
        return status_for_amounts(self.amount, self.remaining_amount)

    def is_overdue(self, today: date) -> bool:
        return (
            self.expected_return_date is not None
            and self.expected_return_date < today
            and self.status in OPEN_LENDING_STATUSES
        )

    def days_until_return(self, today: date) -> Optional[int]:
        if self.expected_return_date is None:
            return None
        return (self.expected_return_date - today).days


class LendingPayment(SQLModel, table=True):
    """A repayment received against a lending."""

    __tablename__: ClassVar[str] = "lending_payment"

    id: Optional[int] = Field(default=None, primary_key=True)
    lending_id: int = Field(foreign_key="lending.id", nullable=False, index=True)
    amount: Decimal = Field(max_digits=15, decimal_places=2)
    payment_date: date = Field(nullable=False)
    payment_method: str = Field(default="cash", max_length=32)
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    lending: Optional[Lending] = Relationship(
        back_populates="payments",
        sa_relationship=relationship("Lending", back_populates="payments"),
    )
