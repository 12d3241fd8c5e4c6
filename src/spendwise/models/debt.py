"""Money other people owe the user, and the payments received against it."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class DebtStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


DEBT_PRIORITIES: dict[str, str] = {
    "1": "Highest",
    "2": "High",
    "3": "Medium",
    "4": "Low",
    "5": "Lowest",
}
DEBT_PAYMENT_TYPES: tuple[str, ...] = ("one_time", "monthly", "yearly", "custom")
DEBT_PAYMENT_METHODS: tuple[str, ...] = ("cash", "bank_transfer", "card", "mobile_payment", "other")


class Debt(SQLModel, table=True):
    """A receivable: a debtor owes ``total_amount`` and has repaid ``paid_amount``."""

    __tablename__: ClassVar[str] = "debt"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    debtor_name: str = Field(nullable=False, max_length=255)
    debtor_phone: Optional[str] = Field(default=None, max_length=50)
    debtor_email: Optional[str] = Field(default=None, max_length=255)
    total_amount: Decimal = Field(max_digits=15, decimal_places=2)
    paid_amount: Decimal = Field(default=Decimal("0.00"), max_digits=15, decimal_places=2)
    priority: str = Field(default="3", max_length=1, index=True)
    payment_type: str = Field(default="one_time", max_length=16, index=True)
    installment_amount: Optional[Decimal] = Field(default=None, max_digits=15, decimal_places=2)
    due_date: Optional[date] = Field(default=None, index=True)
    start_date: date = Field(nullable=False)
    status: DebtStatus = Field(default=DebtStatus.PENDING, nullable=False, index=True)
    notes: Optional[str] = Field(default=None, max_length=2000)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    payments: list["DebtPayment"] = Relationship(
        back_populates="debt",
        sa_relationship=relationship(
            "DebtPayment",
            back_populates="debt",
            cascade="all, delete-orphan",
            order_by="DebtPayment.payment_date.desc()",
        ),
    )

    @property
    def remaining_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    def is_overdue(self, today: date) -> bool:
        return (
            self.due_date is not None
            and self.due_date < today
            and self.status != DebtStatus.COMPLETED
        )


class DebtPayment(SQLModel, table=True):
    """A repayment received from a debtor."""

    __tablename__: ClassVar[str] = "debt_payment"

    id: Optional[int] = Field(default=None, primary_key=True)
    debt_id: int = Field(foreign_key="debt.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    amount: Decimal = Field(max_digits=15, decimal_places=2)
    payment_date: date = Field(nullable=False)
    payment_method: str = Field(default="cash", max_length=32)
    notes: Optional[str] = Field(default=None, max_length=1000)
    balance_transaction_id: Optional[int] = Field(
        default=None, foreign_key="balance_transaction.id"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    debt: Optional[Debt] = Relationship(
        back_populates="payments",
        sa_relationship=relationship("Debt", back_populates="payments"),
    )
