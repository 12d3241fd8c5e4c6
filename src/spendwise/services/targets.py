"""Savings targets and their affordability against the live balance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlmodel import Session, select

from ..errors import DomainConflict, ValidationError
from ..models.balance import BalanceTransaction
from ..models.target import Target, TargetStatus
from ..money import to_money
from . import ledger
from .access import get_owned

UPDATABLE_FIELDS = ("name", "target_amount", "description", "image_url", "priority", "status")
# Purchase is the only way into COMPLETED.
EDITABLE_STATUSES = (TargetStatus.ACTIVE, TargetStatus.CANCELLED)


@dataclass(frozen=True, slots=True)
class Affordability:
    can_afford: bool
    amount_needed: Decimal


@dataclass(frozen=True, slots=True)
class TargetBoard:
    """Active targets split by whether the current balance covers them."""

    current_balance: Decimal
    affordable: list[Target]
    not_affordable: list[Target]

    @property
    def total_targets(self) -> int:
        return len(self.affordable) + len(self.not_affordable)


@dataclass(frozen=True, slots=True)
class Purchase:
    target: Target
    entry: BalanceTransaction
    new_balance: Decimal


def affordability(target: Target, balance: Decimal) -> Affordability:
    return Affordability(
        can_afford=balance >= target.target_amount,
        amount_needed=max(Decimal("0.00"), target.target_amount - balance),
    )


def get_target(session: Session, target_id: int, user_id: int) -> Target:
    return get_owned(session, Target, target_id, user_id, resource="target")


def board(session: Session, user_id: int) -> TargetBoard:
    balance = ledger.current_balance(session, user_id)
    has_balance = ledger.has_balance(session, user_id)
    statement = (
        select(Target)
        .where(Target.user_id == user_id)
        .where(Target.status == TargetStatus.ACTIVE)
        .order_by(Target.target_amount.asc(), Target.id.asc())  # type: ignore
    )
    affordable: list[Target] = []
    not_affordable: list[Target] = []
    for target in session.exec(statement).all():
        if has_balance and affordability(target, balance).can_afford:
            affordable.append(target)
        else:
            not_affordable.append(target)
    return TargetBoard(current_balance=balance, affordable=affordable, not_affordable=not_affordable)


def create_target(
    session: Session,
    user_id: int,
    *,
    name: str,
    target_amount: Any,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
    priority: str = "medium",
) -> Target:
    target = Target(
        user_id=user_id,
        name=name,
        target_amount=to_money(target_amount),
        description=description,
        image_url=image_url,
        priority=priority or "medium",
        status=TargetStatus.ACTIVE,
    )
    session.add(target)
    session.flush()
    return target


def update_target(session: Session, target_id: int, user_id: int, changes: dict[str, Any]) -> Target:
    """Partial update; only a purchase marks a target completed."""

    target = get_target(session, target_id, user_id)
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError({name: ["Unknown field."] for name in sorted(unknown)})
    if changes.get("status") is not None:
        status = TargetStatus(changes["status"])
        if target.status == TargetStatus.COMPLETED:
            raise DomainConflict("target.completed_locked", code="TARGET_COMPLETED")
        if status not in EDITABLE_STATUSES:
            raise ValidationError({"status": ["Status must be active or cancelled."]})
    for name, value in changes.items():
        if name == "target_amount":
            value = to_money(value)
        elif name == "status":
            value = TargetStatus(value)
        setattr(target, name, value)
    target.updated_at = datetime.now(timezone.utc)
    session.add(target)
    session.flush()
    return target


def delete_target(session: Session, target_id: int, user_id: int) -> None:
    session.delete(get_target(session, target_id, user_id))
    session.flush()


def purchase(session: Session, target_id: int, user_id: int) -> Purchase:
    target = get_target(session, target_id, user_id)
    entry = ledger.purchase_target(session, target)
    return Purchase(target=target, entry=entry, new_balance=entry.balance_after)
