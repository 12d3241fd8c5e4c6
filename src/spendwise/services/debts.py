"""Receivables: debts owed to the user and the payments collected on them."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlmodel import Session, select

from ..errors import DomainConflict, ValidationError
from ..logging_config import get_logger
from ..models.debt import DEBT_PRIORITIES, Debt, DebtPayment, DebtStatus
from ..money import percentage, to_money
from . import ledger
from .access import get_owned

logger = get_logger("services.debts")

# Fields a client may change through update_debt.
UPDATABLE_FIELDS = (
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


@dataclass(slots=True)
class DebtFilters:
    status: Optional[DebtStatus] = None
    priority: Optional[str] = None
    payment_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DebtStatistics:
    total_owed: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    overall_progress: float
    total_debts: int
    overdue_debts: int
    by_status: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)


def progress_percentage(debt: Debt) -> float:
    return percentage(debt.paid_amount, debt.total_amount)


def list_debts(session: Session, user_id: int, filters: DebtFilters | None = None) -> list[Debt]:
    filters = filters or DebtFilters()
    statement = select(Debt).where(Debt.user_id == user_id)
    if filters.status is not None:
        statement = statement.where(Debt.status == filters.status)
    if filters.priority is not None:
        statement = statement.where(Debt.priority == filters.priority)
    if filters.payment_type is not None:
        statement = statement.where(Debt.payment_type == filters.payment_type)
    statement = statement.order_by(Debt.created_at.desc(), Debt.id.desc())  # type: ignore
    return list(session.exec(statement).all())


def _locked_debt(session: Session, debt_id: int) -> Optional[Debt]:
    statement = (
        select(Debt)
        .where(Debt.id == debt_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return session.exec(statement).first()


def get_debt(session: Session, debt_id: int, user_id: int, *, for_update: bool = False) -> Debt:
    loader = (lambda pk: _locked_debt(session, pk)) if for_update else None
    return get_owned(session, Debt, debt_id, user_id, resource="debt", loader=loader)


def create_debt(
    session: Session,
    user_id: int,
    *,
    debtor_name: str,
    total_amount: Any,
    debtor_phone: Optional[str] = None,
    debtor_email: Optional[str] = None,
    priority: str = "3",
    payment_type: str = "one_time",
    installment_amount: Any = None,
    due_date: Optional[date] = None,
    start_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> Debt:
    debt = Debt(
        user_id=user_id,
        debtor_name=debtor_name,
        debtor_phone=debtor_phone,
        debtor_email=debtor_email,
        total_amount=to_money(total_amount),
        paid_amount=Decimal("0.00"),
        priority=priority,
        payment_type=payment_type,
        installment_amount=to_money(installment_amount) if installment_amount is not None else None,
        due_date=due_date,
        start_date=start_date or date.today(),
        status=DebtStatus.PENDING,
        notes=notes,
    )
    session.add(debt)
    session.flush()
    logger.info("Debt created", extra={"user_id": user_id, "debt_id": debt.id})
    return debt


def update_debt(session: Session, debt_id: int, user_id: int, changes: dict[str, Any]) -> Debt:
    """Apply a partial update; completed debts keep their amount and status."""

    debt = get_debt(session, debt_id, user_id)
    changes = dict(changes)
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError({name: ["Unknown field."] for name in sorted(unknown)})

    if debt.status == DebtStatus.COMPLETED and ("total_amount" in changes or "status" in changes):
        raise DomainConflict("debt.completed_locked", code="DEBT_COMPLETED")

    if "total_amount" in changes:
        total = to_money(changes["total_amount"])
        if total < debt.paid_amount:
            raise ValidationError(
                {"total_amount": ["Total amount cannot be less than the amount already paid."]}
            )
        changes["total_amount"] = total
    if changes.get("status") is not None:
        changes["status"] = DebtStatus(changes["status"])
    if changes.get("installment_amount") is not None:
        changes["installment_amount"] = to_money(changes["installment_amount"])
    if "start_date" in changes and changes["start_date"] is None:
        del changes["start_date"]

    for name, value in changes.items():
        setattr(debt, name, value)

    if "status" not in changes and debt.paid_amount >= debt.total_amount:
        debt.status = DebtStatus.COMPLETED
    debt.updated_at = datetime.now(timezone.utc)
    session.add(debt)
    session.flush()
    return debt


def delete_debt(session: Session, debt_id: int, user_id: int) -> None:
    """Delete the debt and its payments; ledger entries it produced are kept."""

    session.delete(get_debt(session, debt_id, user_id))
    session.flush()


def record_payment(
    session: Session,
    debt_id: int,
    user_id: int,
    *,
    amount: Any,
    payment_date: date,
    payment_method: str = "cash",
    notes: Optional[str] = None,
    add_to_balance: bool = False,
) -> DebtPayment:
    """Record a repayment; every check runs before the first write."""

    debt = get_debt(session, debt_id, user_id, for_update=True)
    value = to_money(amount)
    if value <= 0:
        raise ValidationError({"amount": ["Amount must be greater than 0."]})
    if debt.status in (DebtStatus.CANCELLED, DebtStatus.COMPLETED):
        raise DomainConflict(
            "debt.not_payable", code="DEBT_NOT_PAYABLE", params={"status": debt.status.value}
        )
    if value > debt.remaining_amount:
        raise DomainConflict(
            "debt.payment_exceeds_remaining",
            code="PAYMENT_EXCEEDS_REMAINING",
            status_code=422,
        )

    entry_id: Optional[int] = None
    if add_to_balance:
        entry = ledger.debt_payment_credit(
            session, user_id, value, debt_id=debt.id, debtor_name=debt.debtor_name
        )
        entry_id = entry.id

    payment = DebtPayment(
        debt_id=debt.id,
        user_id=user_id,
        amount=value,
        payment_date=payment_date,
        payment_method=payment_method or "cash",
        notes=notes,
        balance_transaction_id=entry_id,
    )
    session.add(payment)

    debt.paid_amount = min(debt.paid_amount + value, debt.total_amount)
    if debt.paid_amount >= debt.total_amount:
        debt.status = DebtStatus.COMPLETED
    elif debt.status == DebtStatus.PENDING:
        debt.status = DebtStatus.IN_PROGRESS
    debt.updated_at = datetime.now(timezone.utc)
    session.add(debt)
    session.flush()
    logger.info(
        "Debt payment recorded",
        extra={"debt_id": debt.id, "amount": str(value), "status": debt.status.value},
    )
    return payment


def list_payments(session: Session, debt_id: int, user_id: int) -> list[DebtPayment]:
    return list(get_debt(session, debt_id, user_id).payments)


def statistics(session: Session, user_id: int, today: Optional[date] = None) -> DebtStatistics:
    today = today or date.today()
    debts = list_debts(session, user_id)
    total_owed = sum((debt.total_amount for debt in debts), Decimal("0.00"))
    total_paid = sum((debt.paid_amount for debt in debts), Decimal("0.00"))
    by_status = Counter(debt.status.value for debt in debts)
    by_priority = Counter(debt.priority for debt in debts)
    return DebtStatistics(
        total_owed=total_owed,
        total_paid=total_paid,
        total_remaining=total_owed - total_paid,
        overall_progress=percentage(total_paid, total_owed),
        total_debts=len(debts),
        overdue_debts=sum(1 for debt in debts if debt.is_overdue(today)),
        by_status=dict(by_status),
        by_priority={key: by_priority[key] for key in DEBT_PRIORITIES if key in by_priority},
    )


def mark_overdue(session: Session, today: Optional[date] = None) -> int:
    """Flag past-due pending/in-progress debts as overdue; returns the number changed."""

    today = today or date.today()
    statement = (
        select(Debt)
        .where(Debt.due_date < today)  # type: ignore
        .where(Debt.status.in_([DebtStatus.PENDING, DebtStatus.IN_PROGRESS]))  # type: ignore
    )
    changed = 0
    for debt in session.exec(statement).all():
        debt.status = DebtStatus.OVERDUE
        debt.updated_at = datetime.now(timezone.utc)
        session.add(debt)
        changed += 1
    session.flush()
    if changed:
        logger.info("Debts marked overdue", extra={"count": changed})
    return changed
