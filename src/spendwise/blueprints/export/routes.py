"""Export routes: CSV download and the export audit trail."""

from __future__ import annotations

from flask import Response, request

from ... import serializers
from ...errors import ValidationError
from ...extensions import session_scope
from ...i18n import get_locale
from ...services import export_csv
from ..common import current_user_id, ok, pagination, query_date
from . import bp


def _category_arg():
    raw = request.args.get("category_id")
    if not raw:
        return None
    if not raw.isdigit():
        raise ValidationError({"category_id": ["Must be an integer."]})
    return int(raw)


@bp.get("/csv")
def export_expenses_csv():
    """Stream the user's expenses as a CSV attachment."""

    date_from = query_date("date_from")
    date_to = query_date("date_to")
    if date_from and date_to and date_to < date_from:
        raise ValidationError({"date_to": ["End date must be on or after the start date."]})
    with session_scope() as session:
        result = export_csv.export_expenses(
            session,
            current_user_id(),
            date_from=date_from,
            date_to=date_to,
            category_id=_category_arg(),
            locale=get_locale(),
        )
    return Response(
        result.content,
        mimetype="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "Content-Type": "text/csv; charset=utf-8",
        },
    )


@bp.get("/pdf")
def export_pdf():
    export_csv.reject_unsupported("pdf")


@bp.get("/excel")
def export_excel():
    export_csv.reject_unsupported("excel")


@bp.get("/history")
def history():
    with session_scope() as session:
        page = export_csv.export_history(session, current_user_id(), pagination(20))
        data = [serializers.export_history(row) for row in page.items]
    return ok(data, meta=page.meta())
