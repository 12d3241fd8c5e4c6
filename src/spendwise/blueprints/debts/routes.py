"""Debt routes: receivables, their payments and statistics."""

from __future__ import annotations

from datetime import date

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...models.debt import DEBT_PAYMENT_TYPES, DEBT_PRIORITIES, DebtStatus
from ...money import format_money
from ...services import debts as debt_service
from ..common import current_user_id, ok, payload, query_choice
from . import bp
from .forms import DebtForm, DebtPaymentForm


@bp.get("")
def list_debts():
    status = query_choice("status", DebtStatus)
    filters = debt_service.DebtFilters(
        status=DebtStatus(status) if status else None,
        priority=query_choice("priority", DEBT_PRIORITIES),
        payment_type=query_choice("payment_type", DEBT_PAYMENT_TYPES),
    )
    today = date.today()
    with session_scope() as session:
        data = [
            serializers.debt(debt, today=today)
            for debt in debt_service.list_debts(session, current_user_id(), filters)
        ]
    return ok(data)


@bp.get("/statistics")
def statistics():
    with session_scope() as session:
        stats = debt_service.statistics(session, current_user_id())
    return ok(
        {
            "total_owed": format_money(stats.total_owed),
            "total_paid": format_money(stats.total_paid),
            "total_remaining": format_money(stats.total_remaining),
            "overall_progress": stats.overall_progress,
            "total_debts": stats.total_debts,
            "overdue_debts": stats.overdue_debts,
            "by_status": stats.by_status,
            "by_priority": stats.by_priority,
        }
    )


@bp.post("")
def create_debt():
    form = DebtForm.from_mapping(payload()).validated()
    fields = {name: getattr(form, name) for name in DebtForm.FIELDS if name != "status"}
    with session_scope() as session:
        debt = debt_service.create_debt(session, current_user_id(), **fields)
        data = serializers.debt(debt, today=date.today())
    return ok(data, translate("debt.created"), 201)


@bp.get("/<int:debt_id>")
def show_debt(debt_id: int):
    with session_scope() as session:
        debt = debt_service.get_debt(session, debt_id, current_user_id())
        data = serializers.debt(debt, today=date.today(), with_payments=True)
    return ok(data)


@bp.put("/<int:debt_id>")
def update_debt(debt_id: int):
    form = DebtForm.from_mapping(payload(), partial=True).validated()
    with session_scope() as session:
        debt = debt_service.update_debt(session, debt_id, current_user_id(), form.changes())
        data = serializers.debt(debt, today=date.today())
    return ok(data, translate("debt.updated"))


@bp.delete("/<int:debt_id>")
def delete_debt(debt_id: int):
    with session_scope() as session:
        debt_service.delete_debt(session, debt_id, current_user_id())
    return ok(None, translate("debt.deleted"))


@bp.get("/<int:debt_id>/payments")
def list_payments(debt_id: int):
    with session_scope() as session:
        data = [
            serializers.debt_payment(payment)
            for payment in debt_service.list_payments(session, debt_id, current_user_id())
        ]
    return ok(data)


@bp.post("/<int:debt_id>/payments")
def record_payment(debt_id: int):
    """Record a repayment; optionally credit it to the balance."""

    form = DebtPaymentForm.from_mapping(payload()).validated()
    user_id = current_user_id()
    with session_scope() as session:
        payment = debt_service.record_payment(
            session,
            debt_id,
            user_id,
            amount=form.amount,
            payment_date=form.payment_date,
            payment_method=form.payment_method,
            notes=form.notes,
            add_to_balance=form.add_to_balance,
        )
        debt = debt_service.get_debt(session, debt_id, user_id)
        data = {
            "payment": serializers.debt_payment(payment),
            "debt": serializers.debt(debt, today=date.today()),
        }
    return ok(data, translate("debt.payment_recorded"), 201)
