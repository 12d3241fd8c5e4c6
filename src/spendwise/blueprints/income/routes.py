"""Monthly income routes."""

from __future__ import annotations

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...services import incomes as income_service
from ..common import current_user_id, ok, payload
from . import bp
from .forms import IncomeForm


@bp.get("/current")
def current_income():
    with session_scope() as session:
        income = income_service.current_income(session, current_user_id())
        if income is None:
            return ok(None, translate("income.no_income"))
        data = serializers.income(income)
    return ok(data)


@bp.get("/history")
def income_history():
    with session_scope() as session:
        data = [
            serializers.income(income)
            for income in income_service.income_history(session, current_user_id())
        ]
    return ok(data)


@bp.post("")
def create_income():
    form = IncomeForm.from_mapping(payload()).validated()
    with session_scope() as session:
        income = income_service.create_income(
            session,
            current_user_id(),
            monthly_amount=form.monthly_amount,
            effective_from=form.effective_from,
        )
        data = serializers.income(income)
    return ok(data, translate("income.created"), 201)


@bp.get("/<int:income_id>")
def show_income(income_id: int):
    with session_scope() as session:
        data = serializers.income(income_service.get_income(session, income_id, current_user_id()))
    return ok(data)


@bp.put("/<int:income_id>")
def update_income(income_id: int):
    form = IncomeForm.from_mapping(payload(), partial=True).validated()
    with session_scope() as session:
        income = income_service.update_income(
            session, income_id, current_user_id(), **form.changes()
        )
        data = serializers.income(income)
    return ok(data, translate("income.updated"))


@bp.delete("/<int:income_id>")
def delete_income(income_id: int):
    with session_scope() as session:
        income_service.delete_income(session, income_id, current_user_id())
    return ok(None, translate("income.deleted"))
