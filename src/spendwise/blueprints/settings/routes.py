"""Account settings routes."""

from __future__ import annotations

from ... import serializers
from ...extensions import session_scope
from ...i18n import get_locale, supported_locales, translate
from ...models.user import User
from ...services import auth as auth_service
from ...services.currencies import user_currency
from ...services.incomes import current_income
from ..common import current_user_id, ok, payload
from . import bp
from .forms import PasswordForm, ProfileForm


@bp.get("")
def index():
    with session_scope() as session:
        user = session.get(User, current_user_id())
        currency = user_currency(session, user)
        income = current_income(session, user.id)
        data = {
            "user": serializers.user(user, currency),
            "income": serializers.income(income) if income is not None else None,
            "preferences": {
                "language": get_locale(),
                "available_languages": list(supported_locales()),
                "currency": currency.code if currency is not None else None,
            },
        }
    return ok(data)


@bp.put("/profile")
def update_profile():
    form = ProfileForm.from_mapping(payload()).validated()
    with session_scope() as session:
        user = session.get(User, current_user_id())
        auth_service.update_profile(session, user, name=form.name, email=form.email)
        data = serializers.user(user, user_currency(session, user))
    return ok(data, translate("settings.profile_updated"))


@bp.put("/password")
def change_password():
    """Change the password; every issued token is revoked."""

    form = PasswordForm.from_mapping(payload()).validated()
    with session_scope() as session:
        user = session.get(User, current_user_id())
        auth_service.change_password(
            session,
            user,
            current_password=form.current_password,
            new_password=form.new_password,
        )
    return ok(None, translate("settings.password_changed"))
