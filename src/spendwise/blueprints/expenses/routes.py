"""Expense routes."""

from __future__ import annotations

from flask import request

from ... import serializers
from ...errors import ValidationError
from ...extensions import session_scope
from ...forms import query_int
from ...i18n import translate
from ...money import format_money
from ...services import expenses as expense_service
from ..common import current_user_id, ok, payload, query_choice, query_date, query_month
from . import bp
from .forms import ExpenseForm


def _filters() -> expense_service.ExpenseFilters:
    category_id = request.args.get("category_id")
    if category_id and not category_id.isdigit():
        raise ValidationError({"category_id": ["Must be an integer."]})
    return expense_service.ExpenseFilters(
        category_id=int(category_id) if category_id else None,
        date_from=query_date("date_from"),
        date_to=query_date("date_to"),
        search=request.args.get("search") or None,
        sort_by=query_choice("sort_by", expense_service.SORTABLE_FIELDS) or "date",
        sort_order=query_choice("sort_order", ("asc", "desc")) or "desc",
    )


@bp.get("")
def list_expenses():
    filters = _filters()
    with session_scope() as session:
        result = expense_service.list_expenses(
            session,
            current_user_id(),
            filters=filters,
            page=query_int(request.args, "page", 1, maximum=10_000),
            per_page=query_int(request.args, "limit", 20),
        )
        data = {
            "expenses": [serializers.expense(expense) for expense in result.items],
            "pagination": {
                "current_page": result.page,
                "total_pages": result.total_pages,
                "total_expenses": result.total,
                "per_page": result.per_page,
            },
        }
    return ok(data)


@bp.get("/summary")
def summary():
    month = query_month()
    with session_scope() as session:
        result = expense_service.monthly_summary(session, current_user_id(), month)
    return ok(
        {
            "month": month.label(),
            "total_expenses": format_money(result.total_expenses),
            "expense_count": result.expense_count,
            "average_per_day": format_money(result.average_per_day),
        }
    )


@bp.post("")
def create_expense():
    form = ExpenseForm.from_mapping(payload()).validated()
    with session_scope() as session:
        expense = expense_service.create_expense(
            session,
            current_user_id(),
            category_id=form.category_id,
            amount=form.amount,
            expense_date=form.date,
            note=form.note,
        )
        data = serializers.expense(expense)
    return ok(data, translate("expense.created"), 201)


@bp.get("/<int:expense_id>")
def show_expense(expense_id: int):
    with session_scope() as session:
        data = serializers.expense(
            expense_service.get_expense(session, expense_id, current_user_id())
        )
    return ok(data)


@bp.put("/<int:expense_id>")
def update_expense(expense_id: int):
    """Partial update; the amount delta is settled against the balance."""

    form = ExpenseForm.from_mapping(payload(), partial=True).validated()
    with session_scope() as session:
        expense = expense_service.update_expense(
            session, expense_id, current_user_id(), **form.service_kwargs()
        )
        data = serializers.expense(expense)
    return ok(data, translate("expense.updated"))


@bp.delete("/<int:expense_id>")
def delete_expense(expense_id: int):
    with session_scope() as session:
        expense_service.delete_expense(session, expense_id, current_user_id())
    return ok(None, translate("expense.deleted"))
