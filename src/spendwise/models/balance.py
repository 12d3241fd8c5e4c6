"""Running balance aggregate and its append-only ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    CREDIT = "credit"
    DEBIT = "debit"


class LedgerSource(str, Enum):
    """Closed set of reasons a balance can move."""

    SALARY = "salary"
    FREELANCE = "freelance"
    GIFT = "gift"
    INVESTMENT = "investment"
    REFUND = "refund"
    TRANSFER = "transfer"
    EXPENSE = "expense"
    DEBT_PAYMENT = "debt_payment"
    LENDING = "lending"
    LENDING_RETURN = "lending_return"
    TARGET = "target"
    OTHER = "other"


# Sources a user may pick when adding money by hand.
CREDIT_SOURCES: tuple[LedgerSource, ...] = (
    LedgerSource.SALARY,
    LedgerSource.FREELANCE,
    LedgerSource.GIFT,
    LedgerSource.INVESTMENT,
    LedgerSource.REFUND,
    LedgerSource.TRANSFER,
    LedgerSource.OTHER,
)


class Balance(SQLModel, table=True):
    """One running total per user."""

    __tablename__: ClassVar[str] = "balance"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, unique=True, index=True)
    current_balance: Decimal = Field(default=Decimal("0.00"), max_digits=15, decimal_places=2)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class BalanceTransaction(SQLModel, table=True):
    """Immutable ledger entry recording one balance movement.

    ``lending_id``, ``debt_id`` and ``target_id`` are plain indexed columns: the
    entry outlives the row it references (a deleted lending keeps its history).
    """

    __tablename__: ClassVar[str] = "balance_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    balance_id: int = Field(foreign_key="balance.id", nullable=False, index=True)
    type: TransactionType = Field(nullable=False, index=True)
    amount: Decimal = Field(max_digits=15, decimal_places=2)
    source: LedgerSource = Field(nullable=False, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    balance_after: Decimal = Field(max_digits=15, decimal_places=2)
    expense_id: Optional[int] = Field(default=None, foreign_key="expense.id", index=True)
    debt_id: Optional[int] = Field(default=None, index=True)
    lending_id: Optional[int] = Field(default=None, index=True)
    target_id: Optional[int] = Field(default=None, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == TransactionType.CREDIT else -self.amount
