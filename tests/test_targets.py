"""Savings target tests: affordability board and purchases."""

from __future__ import annotations

from decimal import Decimal

import pytest

from spendwise.errors import DomainConflict, ValidationError
from spendwise.models.target import TargetStatus
from spendwise.services import ledger
from spendwise.services import targets as target_service


@pytest.fixture
def target_factory(db_session, user):
    def _create_target(name="Laptop", price="900.00", **kwargs):
        return target_service.create_target(
            db_session, user.id, name=name, target_amount=price, **kwargs
        )

    return _create_target


def test_board_without_balance_lists_everything_as_unaffordable(db_session, user, target_factory):
    target_factory(price="10.00")

    board = target_service.board(db_session, user.id)

    assert board.current_balance == Decimal("0.00")
    assert board.affordable == []
    assert len(board.not_affordable) == 1


def test_board_splits_active_targets_by_balance(db_session, user, fund, target_factory):
    fund("500.00")
    phone = target_factory(name="Phone", price="400.00")
    headphones = target_factory(name="Headphones", price="500.00")
    laptop = target_factory(name="Laptop", price="900.00")
    target_factory(name="Old", price="1.00").status = TargetStatus.CANCELLED

    board = target_service.board(db_session, user.id)

    assert board.affordable == [phone, headphones]
    assert board.not_affordable == [laptop]
    assert board.total_targets == 3


def test_affordability_reports_amount_needed(target_factory):
    target = target_factory(price="900.00")

    assert target_service.affordability(target, Decimal("250.00")).amount_needed == Decimal("650.00")
    enough = target_service.affordability(target, Decimal("1000.00"))
    assert enough.can_afford
    assert enough.amount_needed == Decimal("0.00")


def test_purchase_debits_and_completes(db_session, user, fund, target_factory):
    fund("1000.00")
    target = target_factory()

    purchase = target_service.purchase(db_session, target.id, user.id)

    assert purchase.new_balance == Decimal("100.00")
    assert purchase.target.status == TargetStatus.COMPLETED
    assert ledger.current_balance(db_session, user.id) == Decimal("100.00")
    assert target_service.board(db_session, user.id).total_targets == 0


def test_unaffordable_purchase_leaves_everything_untouched(db_session, user, fund, target_factory):
    fund("100.00")
    target = target_factory()

    with pytest.raises(DomainConflict) as exc:
        target_service.purchase(db_session, target.id, user.id)

    assert exc.value.code == "INSUFFICIENT_BALANCE"
    assert target.status == TargetStatus.ACTIVE
    assert ledger.list_transactions(db_session, user.id).total == 1


def test_update_converts_price_and_status(db_session, user, target_factory):
    target = target_factory()

    updated = target_service.update_target(
        db_session, target.id, user.id, {"target_amount": "75.5", "status": "cancelled"}
    )

    assert updated.target_amount == Decimal("75.50")
    assert updated.status == TargetStatus.CANCELLED


def test_update_cannot_complete_a_target(db_session, user, fund, target_factory):
    fund("1000.00")
    target = target_factory()

    with pytest.raises(ValidationError) as exc:
        target_service.update_target(db_session, target.id, user.id, {"status": "completed"})

    assert "status" in exc.value.errors
    assert target.status == TargetStatus.ACTIVE
    assert ledger.current_balance(db_session, user.id) == Decimal("1000.00")


def test_purchased_target_keeps_its_status(db_session, user, fund, target_factory):
    fund("1000.00")
    target = target_factory()
    target_service.purchase(db_session, target.id, user.id)

    with pytest.raises(DomainConflict) as exc:
        target_service.update_target(db_session, target.id, user.id, {"status": "active"})

    assert exc.value.code == "TARGET_COMPLETED"
    assert target.status == TargetStatus.COMPLETED
    renamed = target_service.update_target(db_session, target.id, user.id, {"name": "Old laptop"})
    assert renamed.name == "Old laptop"


def test_update_rejects_unknown_fields(db_session, user, target_factory):
    target = target_factory()

    with pytest.raises(ValidationError) as exc:
        target_service.update_target(db_session, target.id, user.id, {"completed_at": None})

    assert list(exc.value.errors) == ["completed_at"]
