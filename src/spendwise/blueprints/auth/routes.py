"""Authentication routes: register, login, logout and the current user."""

from __future__ import annotations

from flask import g

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...models.user import User
from ...services import auth as auth_service
from ...services.currencies import user_currency
from ..common import current_user_id, ok, payload
from . import bp
from .forms import LoginForm, RegisterForm


def _session_payload(session, user: User, token: str) -> dict:
    return {
        "user": serializers.user(user, user_currency(session, user)),
        "token": token,
        "token_type": "Bearer",
    }


@bp.post("/register")
def register():
    form = RegisterForm.from_mapping(payload()).validated()
    with session_scope() as session:
        user = auth_service.register_user(
            session, name=form.name, email=form.email, password=form.password
        )
        token = auth_service.issue_token(session, user)
        data = _session_payload(session, user, token)
    return ok(data, translate("auth.register_success"), 201)


@bp.post("/login")
def login():
    form = LoginForm.from_mapping(payload()).validated()
    with session_scope() as session:
        user = auth_service.authenticate(session, email=form.email, password=form.password)
        token = auth_service.issue_token(session, user)
        data = _session_payload(session, user, token)
    return ok(data, translate("auth.login_success"))


@bp.post("/logout")
def logout():
    with session_scope() as session:
        auth_service.revoke_token(session, g.raw_token)
    return ok(None, translate("auth.logout_success"))


@bp.get("/user")
def me():
    with session_scope() as session:
        user = session.get(User, current_user_id())
        data = serializers.user(user, user_currency(session, user))
    return ok(data)
