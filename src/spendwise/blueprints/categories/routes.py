"""Category routes."""

from __future__ import annotations

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...services import categories as category_service
from ..common import current_user_id, ok, payload
from . import bp
from .forms import CategoryForm


@bp.get("")
def list_categories():
    with session_scope() as session:
        data = [
            serializers.category(category)
            for category in category_service.list_categories(session, current_user_id())
        ]
    return ok(data)


@bp.post("")
def create_category():
    form = CategoryForm.from_mapping(payload()).validated()
    with session_scope() as session:
        category = category_service.create_category(
            session,
            current_user_id(),
            name_en=form.name,
            name_ar=form.name_ar,
            icon=form.icon,
            color=form.color,
        )
        data = serializers.category(category)
    return ok(data, translate("category.created"), 201)


@bp.get("/<int:category_id>")
def show_category(category_id: int):
    with session_scope() as session:
        data = serializers.category(
            category_service.get_visible_category(session, category_id, current_user_id())
        )
    return ok(data)


@bp.put("/<int:category_id>")
def update_category(category_id: int):
    form = CategoryForm.from_mapping(payload(), partial=True).validated()
    with session_scope() as session:
        category = category_service.update_category(
            session,
            category_id,
            current_user_id(),
            name_en=form.name,
            name_ar=form.name_ar,
            icon=form.icon,
            color=form.color,
        )
        data = serializers.category(category)
    return ok(data, translate("category.updated"))


@bp.delete("/<int:category_id>")
def delete_category(category_id: int):
    with session_scope() as session:
        category_service.delete_category(session, category_id, current_user_id())
    return ok(None, translate("category.deleted"))
