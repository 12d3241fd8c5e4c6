"""Lending routes."""

from __future__ import annotations

from datetime import date

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...models.lending import LendingStatus
from ...money import format_money
from ...services import lendings as lending_service
from ..common import current_user_id, ok, payload, query_choice
from . import bp
from .forms import LendingForm, LendingPaymentForm


@bp.get("")
def list_lendings():
    status = query_choice("status", LendingStatus)
    today = date.today()
    with session_scope() as session:
        lendings = lending_service.list_lendings(
            session, current_user_id(), LendingStatus(status) if status else None
        )
        data = [serializers.lending(lending, today=today) for lending in lendings]
    return ok(data)


@bp.get("/summary")
def summary():
    with session_scope() as session:
        result = lending_service.summary(session, current_user_id())
    return ok(
        {
            "total_lent": format_money(result.total_lent),
            "total_pending": format_money(result.total_pending),
            "total_received": format_money(result.total_received),
            "overdue_count": result.overdue_count,
        }
    )


@bp.post("")
def create_lending():
    form = LendingForm.from_mapping(payload()).validated()
    with session_scope() as session:
        lending = lending_service.create_lending(
            session,
            current_user_id(),
            borrower_name=form.borrower_name,
            amount=form.amount,
            lending_date=form.lending_date,
            borrower_phone=form.borrower_phone,
            borrower_email=form.borrower_email,
            currency=form.currency,
            description=form.description,
            expected_return_date=form.expected_return_date,
            notes=form.notes,
            deduct_from_balance=form.deduct_from_balance,
        )
        data = serializers.lending(lending, today=date.today())
    return ok(data, translate("lending.created"), 201)


@bp.get("/<int:lending_id>")
def show_lending(lending_id: int):
    with session_scope() as session:
        lending = lending_service.get_lending(session, lending_id, current_user_id())
        data = serializers.lending(lending, today=date.today(), with_payments=True)
    return ok(data)


@bp.put("/<int:lending_id>")
def update_lending(lending_id: int):
    form = LendingForm.from_mapping(payload(), partial=True).validated()
    with session_scope() as session:
        lending = lending_service.update_lending(
            session, lending_id, current_user_id(), form.changes()
        )
        data = serializers.lending(lending, today=date.today())
    return ok(data, translate("lending.updated"))


@bp.delete("/<int:lending_id>")
def delete_lending(lending_id: int):
    with session_scope() as session:
        lending_service.delete_lending(session, lending_id, current_user_id())
    return ok(None, translate("lending.deleted"))


@bp.post("/<int:lending_id>/payments")
def record_payment(lending_id: int):
    form = LendingPaymentForm.from_mapping(payload()).validated()
    user_id = current_user_id()
    with session_scope() as session:
        payment = lending_service.record_payment(
            session,
            lending_id,
            user_id,
            amount=form.amount,
            payment_date=form.payment_date,
            payment_method=form.payment_method,
            notes=form.notes,
            add_to_balance=form.add_to_balance,
        )
        lending = lending_service.get_lending(session, lending_id, user_id)
        data = {
            "payment": serializers.lending_payment(payment),
            "lending": serializers.lending(lending, today=date.today()),
        }
    return ok(data, translate("lending.payment_recorded"), 201)


@bp.delete("/<int:lending_id>/payments/<int:payment_id>")
def delete_payment(lending_id: int, payment_id: int):
    with session_scope() as session:
        lending = lending_service.delete_payment(session, lending_id, payment_id, current_user_id())
        data = serializers.lending(lending, today=date.today())
    return ok(data, translate("lending.payment_deleted"))


@bp.post("/<int:lending_id>/forgive")
def forgive(lending_id: int):
    with session_scope() as session:
        lending = lending_service.forgive(session, lending_id, current_user_id())
        data = serializers.lending(lending, today=date.today())
    return ok(data, translate("lending.forgiven"))
