"""Money lent by the user: lifecycle, repayments, forgiveness and summary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlmodel import Session, select

from ..errors import DomainConflict, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.lending import (
    OPEN_LENDING_STATUSES,
    Lending,
    LendingPayment,
    LendingStatus,
    status_for_amounts,
)
from ..money import percentage, to_money
from . import ledger
from .access import get_owned

logger = get_logger("services.lendings")

UPDATABLE_FIELDS = (
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


@dataclass(frozen=True, slots=True)
class LendingSummary:
    total_lent: Decimal
    total_pending: Decimal
    total_received: Decimal
    overdue_count: int


def progress_percentage(lending: Lending) -> float:
    return percentage(lending.total_received, lending.amount)


def _touch(lending: Lending) -> None:
    lending.updated_at = datetime.now(timezone.utc)


def list_lendings(
    session: Session, user_id: int, status: Optional[LendingStatus] = None
) -> list[Lending]:
    statement = select(Lending).where(Lending.user_id == user_id)
    if status is not None:
        statement = statement.where(Lending.status == status)
    statement = statement.order_by(Lending.lending_date.desc(), Lending.id.desc())  # type: ignore
    return list(session.exec(statement).all())


def _locked_lending(session: Session, lending_id: int) -> Optional[Lending]:
    statement = (
        select(Lending)
        .where(Lending.id == lending_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return session.exec(statement).first()


def get_lending(
    session: Session, lending_id: int, user_id: int, *, for_update: bool = False
) -> Lending:
    loader = (lambda pk: _locked_lending(session, pk)) if for_update else None
    return get_owned(session, Lending, lending_id, user_id, resource="lending", loader=loader)


def create_lending(
    session: Session,
    user_id: int,
    *,
    borrower_name: str,
    amount: Any,
    lending_date: date,
    borrower_phone: Optional[str] = None,
    borrower_email: Optional[str] = None,
    currency: str = "USD",
    description: Optional[str] = None,
    expected_return_date: Optional[date] = None,
    notes: Optional[str] = None,
    deduct_from_balance: bool = True,
) -> Lending:
    """Record a loan with ``remaining == amount`` and, by default, debit the balance."""

    value = to_money(amount)
    lending = Lending(
        user_id=user_id,
        borrower_name=borrower_name,
        borrower_phone=borrower_phone,
        borrower_email=borrower_email,
        amount=value,
        remaining_amount=value,
        currency=(currency or "USD").upper(),
        description=description,
        lending_date=lending_date,
        expected_return_date=expected_return_date,
        status=LendingStatus.PENDING,
        notes=notes,
    )
    session.add(lending)
    session.flush()
    if deduct_from_balance:
        ledger.deduct_for_lending(
            session, user_id, value, lending_id=lending.id, borrower_name=borrower_name
        )
    logger.info(
        "Lending created",
        extra={"lending_id": lending.id, "deducted": deduct_from_balance},
    )
    return lending


def update_lending(
    session: Session, lending_id: int, user_id: int, changes: dict[str, Any]
) -> Lending:
    """Partial update; a new amount keeps what was already received.

    Status follows the amounts. An explicit ``status`` must agree with them,
    except ``forgiven``, which writes off the remainder. A forgiven lending
    keeps its amount and status.
    """

    lending = get_lending(session, lending_id, user_id)
    changes = dict(changes)
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError({name: ["Unknown field."] for name in sorted(unknown)})

    if lending.status == LendingStatus.FORGIVEN and ("amount" in changes or "status" in changes):
        raise DomainConflict("lending.forgiven_locked", code="LENDING_FORGIVEN")

    lending_date = changes.get("lending_date", lending.lending_date)
    expected = changes.get("expected_return_date", lending.expected_return_date)
    if expected is not None and expected < lending_date:
        raise ValidationError(
            {"expected_return_date": ["Expected return date must be on or after the lending date."]}
        )

    new_amount = to_money(changes.pop("amount")) if "amount" in changes else lending.amount
    new_remaining = max(Decimal("0.00"), new_amount - lending.total_received)
    status = status_for_amounts(new_amount, new_remaining)
    explicit_status = changes.pop("status", None)
    if explicit_status is not None:
        requested = LendingStatus(explicit_status)
        if requested == LendingStatus.FORGIVEN:
            status, new_remaining = requested, Decimal("0.00")
        elif requested != status:
            raise ValidationError(
                {"status": [f"Status must be {status.value} for the amounts recorded."]}
            )
    if changes.get("currency"):
        changes["currency"] = changes["currency"].upper()

    for name, value in changes.items():
        setattr(lending, name, value)
    if lending.status != LendingStatus.FORGIVEN:
        lending.amount = new_amount
        lending.remaining_amount = new_remaining
        lending.status = status
    _touch(lending)
    session.add(lending)
    session.flush()
    return lending


def delete_lending(session: Session, lending_id: int, user_id: int) -> None:
    """Refund the original amount to the balance, then drop the lending and its payments."""

    lending = get_lending(session, lending_id, user_id)
    if ledger.has_balance(session, user_id):
        ledger.refund_lending(
            session,
            user_id,
            lending.amount,
            lending_id=lending.id,
            borrower_name=lending.borrower_name,
        )
    session.delete(lending)
    session.flush()
    logger.info("Lending deleted", extra={"lending_id": lending_id})


def record_payment(
    session: Session,
    lending_id: int,
    user_id: int,
    *,
    amount: Any,
    payment_date: date,
    payment_method: str = "cash",
    notes: Optional[str] = None,
    add_to_balance: bool = True,
) -> LendingPayment:
    lending = get_lending(session, lending_id, user_id, for_update=True)
    value = to_money(amount)
    if value <= 0:
        raise ValidationError({"amount": ["Amount must be greater than 0."]})
    if lending.status == LendingStatus.FORGIVEN:
        raise DomainConflict("lending.forgiven_locked", code="LENDING_FORGIVEN")
    if value > lending.remaining_amount:
        raise ValidationError(
            {"amount": [f"Amount may not be greater than {lending.remaining_amount:.2f}."]},
            message_key="lending.payment_exceeds_remaining",
            code="PAYMENT_EXCEEDS_REMAINING",
        )

    payment = LendingPayment(
        lending_id=lending.id,
        amount=value,
        payment_date=payment_date,
        payment_method=payment_method or "cash",
        notes=notes,
    )
    session.add(payment)
    lending.remaining_amount = lending.remaining_amount - value
    lending.status = lending.derive_status()
    _touch(lending)
    session.add(lending)
    session.flush()

    if add_to_balance:
        ledger.add_lending_return(
            session, user_id, value, lending_id=lending.id, borrower_name=lending.borrower_name
        )
    return payment


def delete_payment(session: Session, lending_id: int, payment_id: int, user_id: int) -> Lending:
    """Remove a payment and restore the remaining amount.

    Any ledger credit made when the payment was recorded is left in place.
    """

    lending = get_lending(session, lending_id, user_id)
    payment = session.get(LendingPayment, payment_id)
    if payment is None:
        raise NotFoundError("lending_payment")
    if payment.lending_id != lending.id:
        raise DomainConflict(
            "lending.payment_mismatch", code="PAYMENT_MISMATCH", status_code=400
        )

    if lending.status != LendingStatus.FORGIVEN:
        lending.remaining_amount = min(lending.amount, lending.remaining_amount + payment.amount)
        lending.status = lending.derive_status()
    _touch(lending)
    session.delete(payment)
    session.add(lending)
    session.flush()
    session.refresh(lending, attribute_names=["payments"])
    return lending


def forgive(session: Session, lending_id: int, user_id: int) -> Lending:
    lending = get_lending(session, lending_id, user_id)
    lending.status = LendingStatus.FORGIVEN
    lending.remaining_amount = Decimal("0.00")
    _touch(lending)
    session.add(lending)
    session.flush()
    return lending


def summary(session: Session, user_id: int, today: Optional[date] = None) -> LendingSummary:
    today = today or date.today()
    lendings = list_lendings(session, user_id)
    total_lent = sum((lending.amount for lending in lendings), Decimal("0.00"))
    total_pending = sum(
        (lending.remaining_amount for lending in lendings if lending.status in OPEN_LENDING_STATUSES),
        Decimal("0.00"),
    )
    return LendingSummary(
        total_lent=total_lent,
        total_pending=total_pending,
        total_received=total_lent - total_pending,
        overdue_count=sum(1 for lending in lendings if lending.is_overdue(today)),
    )
