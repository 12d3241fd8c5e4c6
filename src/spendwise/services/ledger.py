"""Balance aggregate and the money-movement operations.

Every function here runs inside the caller's session: the balance update and
the ledger append are flushed together and committed (or rolled back) by the
surrounding ``session_scope``. Nothing else writes ``Balance.current_balance``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlmodel import Session

from ..errors import DomainConflict, ValidationError
from ..infra.repositories import SQLModelBalanceRepository
from ..logging_config import get_logger
from ..models.balance import (
    CREDIT_SOURCES,
    Balance,
    BalanceTransaction,
    LedgerSource,
    TransactionType,
)
from ..models.target import Target, TargetStatus
from ..money import to_money
from .pagination import Page, Pagination

logger = get_logger("services.ledger")

DESCRIPTION_MAX = 255


@dataclass(frozen=True, slots=True)
class LedgerCheck:
    """Result of replaying a user's ledger against the stored balance."""

    stored: Decimal
    replayed: Decimal
    entries: int
    first_bad_entry_id: Optional[int] = None

    @property
    def consistent(self) -> bool:
        return self.stored == self.replayed and self.first_bad_entry_id is None


def get_or_create_balance(session: Session, user_id: int, *, lock: bool = True) -> Balance:
    """Return the user's balance row, creating a zero balance on first access."""

    repo = SQLModelBalanceRepository(session)
    balance = repo.get_for_update(user_id) if lock else repo.get(user_id)
    if balance is None:
        balance = repo.save_balance(Balance(user_id=user_id, current_balance=Decimal("0.00")))
        logger.info("Balance created", extra={"user_id": user_id})
    return balance


def current_balance(session: Session, user_id: int) -> Decimal:
    """Read-only view of the running total (zero when no balance exists yet)."""

    balance = SQLModelBalanceRepository(session).get(user_id)
    return balance.current_balance if balance is not None else Decimal("0.00")


def has_balance(session: Session, user_id: int) -> bool:
    return SQLModelBalanceRepository(session).get(user_id) is not None


def _positive_amount(amount: Any) -> Decimal:
    try:
        value = to_money(amount)
    except ValueError as exc:
        raise ValidationError({"amount": ["Amount must be a number."]}) from exc
    if value <= 0:
        raise ValidationError({"amount": ["Amount must be greater than 0."]})
    return value


def _clip(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    return description[:DESCRIPTION_MAX]


def _apply(
    session: Session,
    *,
    user_id: int,
    tx_type: TransactionType,
    amount: Any,
    source: LedgerSource,
    description: Optional[str] = None,
    expense_id: Optional[int] = None,
    debt_id: Optional[int] = None,
    lending_id: Optional[int] = None,
    target_id: Optional[int] = None,
) -> BalanceTransaction:
    """Mutate the balance and append exactly one ledger entry."""

    value = _positive_amount(amount)
    repo = SQLModelBalanceRepository(session)
    balance = get_or_create_balance(session, user_id)

    if tx_type == TransactionType.CREDIT:
        balance.current_balance = balance.current_balance + value
    else:
        balance.current_balance = balance.current_balance - value
    balance.updated_at = datetime.now(timezone.utc)
    repo.save_balance(balance)

    entry = repo.append_entry(
        BalanceTransaction(
            user_id=user_id,
            balance_id=balance.id,
            type=tx_type,
            amount=value,
            source=source,
            description=_clip(description),
            balance_after=balance.current_balance,
            expense_id=expense_id,
            debt_id=debt_id,
            lending_id=lending_id,
            target_id=target_id,
        )
    )
    logger.info(
        "Balance moved",
        extra={
            "user_id": user_id,
            "type": tx_type.value,
            "source": source.value,
            "amount": str(value),
            "balance_after": str(balance.current_balance),
            "entry_id": entry.id,
        },
    )
    return entry


def credit(
    session: Session,
    user_id: int,
    amount: Any,
    source: LedgerSource | str,
    description: Optional[str] = None,
) -> BalanceTransaction:
    """Add money to the balance from an external source (salary, gift, ...)."""

    try:
        source = LedgerSource(source)
    except ValueError as exc:
        raise ValidationError({"source": ["Unknown balance source."]}) from exc
    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.CREDIT,
        amount=amount,
        source=source,
        description=description,
    )


def debit(
    session: Session,
    user_id: int,
    amount: Any,
    *,
    expense_id: Optional[int] = None,
    description: Optional[str] = None,
) -> BalanceTransaction:
    """Take money out of the balance; the total may go negative."""

    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.DEBIT,
        amount=amount,
        source=LedgerSource.EXPENSE if expense_id is not None else LedgerSource.OTHER,
        description=description,
        expense_id=expense_id,
    )


def refund(
    session: Session,
    user_id: int,
    amount: Any,
    *,
    expense_id: Optional[int] = None,
    description: Optional[str] = None,
) -> BalanceTransaction:
    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.CREDIT,
        amount=amount,
        source=LedgerSource.REFUND,
        description=description or "Expense refund",
        expense_id=expense_id,
    )


def deduct_for_lending(
    session: Session, user_id: int, amount: Any, *, lending_id: int, borrower_name: str
) -> BalanceTransaction:
    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.DEBIT,
        amount=amount,
        source=LedgerSource.LENDING,
        description=f"Lent to {borrower_name}",
        lending_id=lending_id,
    )


def add_lending_return(
    session: Session, user_id: int, amount: Any, *, lending_id: int, borrower_name: str
) -> BalanceTransaction:
    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.CREDIT,
        amount=amount,
        source=LedgerSource.LENDING_RETURN,
        description=f"Payment from {borrower_name}",
        lending_id=lending_id,
    )


def refund_lending(
    session: Session, user_id: int, amount: Any, *, lending_id: int, borrower_name: str
) -> BalanceTransaction:
    """Return a cancelled lending's original amount to the balance."""

    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.CREDIT,
        amount=amount,
        source=LedgerSource.REFUND,
        description=f"Lending to {borrower_name} cancelled",
        lending_id=lending_id,
    )


def debt_payment_credit(
    session: Session, user_id: int, amount: Any, *, debt_id: int, debtor_name: str
) -> BalanceTransaction:
    return _apply(
        session,
        user_id=user_id,
        tx_type=TransactionType.CREDIT,
        amount=amount,
        source=LedgerSource.DEBT_PAYMENT,
        description=f"Debt payment from {debtor_name}",
        debt_id=debt_id,
    )


def purchase_target(session: Session, target: Target) -> BalanceTransaction:
    """Debit the target price and mark the target completed in one unit.

    Both checks run before any write, so a rejected purchase leaves no trace.
    """

    if target.status != TargetStatus.ACTIVE:
        raise DomainConflict(
            "target.not_active", code="TARGET_NOT_ACTIVE", status_code=409
        )
    balance = get_or_create_balance(session, target.user_id)
    if balance.current_balance < target.target_amount:
        raise DomainConflict(
            "target.insufficient_balance", code="INSUFFICIENT_BALANCE", status_code=400
        )

    entry = _apply(
        session,
        user_id=target.user_id,
        tx_type=TransactionType.DEBIT,
        amount=target.target_amount,
        source=LedgerSource.TARGET,
        description=f"Purchased target: {target.name}",
        target_id=target.id,
    )
    now = datetime.now(timezone.utc)
    target.status = TargetStatus.COMPLETED
    target.completed_at = now
    target.updated_at = now
    session.add(target)
    session.flush()
    return entry


def list_transactions(
    session: Session,
    user_id: int,
    *,
    tx_type: Optional[TransactionType] = None,
    source: Optional[LedgerSource] = None,
    pagination: Pagination | None = None,
) -> Page[BalanceTransaction]:
    """Newest-first ledger listing filtered by direction and source."""

    pagination = pagination or Pagination()
    repo = SQLModelBalanceRepository(session)
    total = repo.count_entries(user_id, tx_type=tx_type, source=source)
    items = repo.list_entries(
        user_id,
        tx_type=tx_type,
        source=source,
        limit=pagination.per_page,
        offset=pagination.offset,
    )
    return Page(items=items, page=pagination.page, per_page=pagination.per_page, total=total)


def credit_sources() -> tuple[LedgerSource, ...]:
    return CREDIT_SOURCES


def verify_ledger(session: Session, user_id: int) -> LedgerCheck:
    """Replay a user's entries and compare against the stored running total."""

    repo = SQLModelBalanceRepository(session)
    running = Decimal("0.00")
    bad_entry: Optional[int] = None
    entries = repo.entries_in_order(user_id)
    for entry in entries:
        running += entry.signed_amount
        if bad_entry is None and entry.balance_after != running:
            bad_entry = entry.id
    return LedgerCheck(
        stored=current_balance(session, user_id),
        replayed=running,
        entries=len(entries),
        first_bad_entry_id=bad_entry,
    )
