"""Savings target routes."""

from __future__ import annotations

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...money import format_money
from ...services import ledger
from ...services import targets as target_service
from ..common import current_user_id, ok, payload
from . import bp
from .forms import TargetForm


@bp.get("")
def index():
    """Active targets split by affordability against the current balance."""

    with session_scope() as session:
        result = target_service.board(session, current_user_id())
        balance = result.current_balance
        data = {
            "current_balance": format_money(balance),
            "affordable": [serializers.target(target, balance) for target in result.affordable],
            "not_affordable": [
                serializers.target(target, balance) for target in result.not_affordable
            ],
            "total_targets": result.total_targets,
            "affordable_count": len(result.affordable),
        }
    return ok(data)


@bp.post("")
def create_target():
    form = TargetForm.from_mapping(payload()).validated()
    user_id = current_user_id()
    with session_scope() as session:
        target = target_service.create_target(
            session,
            user_id,
            name=form.name,
            target_amount=form.price,
            description=form.description,
            image_url=form.image_url,
            priority=form.priority,
        )
        data = serializers.target(target, ledger.current_balance(session, user_id))
    return ok(data, translate("target.created"), 201)


@bp.get("/<int:target_id>")
def show_target(target_id: int):
    user_id = current_user_id()
    with session_scope() as session:
        target = target_service.get_target(session, target_id, user_id)
        data = serializers.target(target, ledger.current_balance(session, user_id))
    return ok(data)


@bp.put("/<int:target_id>")
def update_target(target_id: int):
    form = TargetForm.from_mapping(payload(), partial=True).validated()
    user_id = current_user_id()
    with session_scope() as session:
        target = target_service.update_target(session, target_id, user_id, form.service_kwargs())
        data = serializers.target(target, ledger.current_balance(session, user_id))
    return ok(data, translate("target.updated"))


@bp.delete("/<int:target_id>")
def delete_target(target_id: int):
    with session_scope() as session:
        target_service.delete_target(session, target_id, current_user_id())
    return ok(None, translate("target.deleted"))


@bp.post("/<int:target_id>/purchase")
def purchase(target_id: int):
    """Debit the price and complete the target in one transaction."""

    with session_scope() as session:
        result = target_service.purchase(session, target_id, current_user_id())
        data = {
            "target": serializers.target(result.target, result.new_balance),
            "transaction": serializers.ledger_entry(result.entry),
            "new_balance": format_money(result.new_balance),
        }
    return ok(data, translate("target.purchased"))
