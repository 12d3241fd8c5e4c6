"""Dashboard routes: monthly overview, trends and category breakdown."""

from __future__ import annotations

from flask import request

from ... import serializers
from ...errors import ValidationError
from ...extensions import session_scope
from ...i18n import get_locale
from ...money import format_money
from ...services import dashboard as dashboard_service
from ..common import current_user_id, ok, query_choice, query_month
from . import bp


def _trend_limit() -> int:
    raw = request.args.get("limit")
    if not raw:
        return 6
    try:
        limit = int(raw)
    except ValueError:
        limit = 0
    if not 1 <= limit <= dashboard_service.MAX_TREND_LIMIT:
        raise ValidationError(
            {"limit": [f"Limit must be between 1 and {dashboard_service.MAX_TREND_LIMIT}."]}
        )
    return limit


def _category_row(row: dashboard_service.CategorySpend) -> dict:
    return {
        "category_id": row.category.id,
        "category": serializers.category(row.category),
        "category_name": row.category.display_name(get_locale()),
        "total_amount": format_money(row.total_amount),
        "percentage": row.percentage,
        "expense_count": row.expense_count,
    }


@bp.get("")
@bp.get("/overview")
def overview():
    month = query_month()
    with session_scope() as session:
        result = dashboard_service.overview(session, current_user_id(), month)
        top = result.top_category
        data = {
            "month": month.label(),
            "monthly_income": format_money(result.monthly_income),
            "total_expenses": format_money(result.total_expenses),
            "remaining_balance": format_money(result.remaining_balance),
            "spending_percentage": result.spending_percentage,
            "expense_count": result.expense_count,
            "top_category": (
                {
                    "category": top.category.display_name(get_locale()),
                    "amount": format_money(top.total_amount),
                    "percentage": top.percentage,
                }
                if top is not None
                else None
            ),
            "expense_by_category": [_category_row(row) for row in result.by_category],
            "daily_expenses": [
                {"date": day.day.isoformat(), "amount": format_money(day.amount)}
                for day in result.daily
            ],
        }
    return ok(data)


@bp.get("/trends")
def trends():
    period = query_choice("period", dashboard_service.TREND_PERIODS) or "monthly"
    limit = _trend_limit()
    with session_scope() as session:
        points = dashboard_service.trends(session, current_user_id(), limit=limit)
    return ok(
        {
            "period": period,
            "trends": [
                {
                    "period": point.month.label(),
                    "label": point.month.display_name(),
                    "total_income": format_money(point.income),
                    "total_expenses": format_money(point.expenses),
                    "savings": format_money(point.savings),
                }
                for point in points
            ],
        }
    )


@bp.get("/category-breakdown")
def category_breakdown():
    month = query_month()
    with session_scope() as session:
        result = dashboard_service.category_breakdown(session, current_user_id(), month)
        data = {
            "month": month.label(),
            "categories": [
                {
                    "name": row.category.display_name(get_locale()),
                    "amount": format_money(row.total_amount),
                    "percentage": row.percentage,
                    "color": row.category.color,
                }
                for row in result.categories
            ],
            "total": format_money(result.total),
        }
    return ok(data)
