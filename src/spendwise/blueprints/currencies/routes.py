"""Currency catalog routes and the user's display-currency preference."""

from __future__ import annotations

from ... import serializers
from ...errors import ValidationError
from ...extensions import session_scope
from ...i18n import translate
from ...models.user import User
from ...services import currencies as currency_service
from ..common import current_user_id, ok, payload
from . import bp


@bp.get("")
def list_currencies():
    with session_scope() as session:
        data = [
            serializers.currency(currency)
            for currency in currency_service.active_currencies(session)
        ]
    return ok(data)


@bp.get("/default")
def default_currency():
    with session_scope() as session:
        currency = currency_service.default_currency(session)
        data = serializers.currency(currency) if currency is not None else None
    return ok(data)


@bp.get("/active")
def active_currency():
    """The current user's preference, falling back to the system default."""

    with session_scope() as session:
        user = session.get(User, current_user_id())
        currency = currency_service.user_currency(session, user)
        data = serializers.currency(currency) if currency is not None else None
    return ok(data)


@bp.put("/set")
def set_currency():
    code = payload().get("currency_code")
    if not isinstance(code, str) or not code.strip():
        raise ValidationError({"currency_code": ["This field is required."]})
    with session_scope() as session:
        user = session.get(User, current_user_id())
        currency = currency_service.set_user_currency(session, user, code.strip())
        data = serializers.currency(currency)
    return ok(data, translate("currency.updated"))


@bp.get("/<code>")
def show_currency(code: str):
    with session_scope() as session:
        data = serializers.currency(currency_service.get_currency(session, code))
    return ok(data)
