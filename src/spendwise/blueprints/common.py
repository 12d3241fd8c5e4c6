"""Helpers shared by the API blueprints: envelopes, auth and request parsing."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from flask import Flask, g, jsonify, request

from ..errors import AuthenticationError, ValidationError
from ..extensions import session_scope
from ..forms import query_int
from ..models.user import User
from ..services import auth as auth_service
from ..services.pagination import Pagination
from ..services.periods import Month

# Endpoints reachable without a bearer token.
PUBLIC_ENDPOINTS = frozenset({"auth.register", "auth.login", "static"})


def ok(data: Any = None, message: Optional[str] = None, status: int = 200, **extra: Any):
    """Render the success envelope."""

    payload: dict[str, Any] = {"success": True, "data": data}
    if message:
        payload["message"] = message
    payload.update(extra)
    return jsonify(payload), status


def payload() -> Mapping[str, Any]:
    """JSON body (or form data) of the current request."""

    body = request.get_json(silent=True)
    if body is None:
        return request.form.to_dict()
    if not isinstance(body, dict):
        raise ValidationError({"body": ["Request body must be a JSON object."]})
    return body


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user() -> User:
    user = g.get("current_user")
    if user is None:
        raise AuthenticationError()
    return user


def current_user_id() -> int:
    return current_user().id


def pagination(default_per_page: int = 15) -> Pagination:
    return Pagination(
        page=query_int(request.args, "page", 1, maximum=10_000),
        per_page=query_int(request.args, "per_page", default_per_page),
    )


def query_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError({name: ["Enter a valid date (YYYY-MM-DD)."]}) from exc


def query_month(name: str = "month") -> Month:
    """Parse a ``YYYY-MM`` query parameter, defaulting to the current month."""

    value = request.args.get(name)
    if not value:
        return Month.of(date.today())
    try:
        return Month.parse(value)
    except ValueError as exc:
        raise ValidationError({name: ["Enter a valid month (YYYY-MM)."]}) from exc


def query_choice(name: str, choices) -> Optional[str]:
    value = request.args.get(name)
    if not value:
        return None
    allowed = [getattr(choice, "value", choice) for choice in choices]
    if value not in allowed:
        raise ValidationError({name: [f"Choose one of: {', '.join(allowed)}."]})
    return value


def init_auth(app: Flask) -> None:
    """Resolve the bearer token on every non-public request."""

    @app.before_request
    def _authenticate() -> None:
        g.current_user = None
        g.raw_token = None
        if request.endpoint is None or request.endpoint in PUBLIC_ENDPOINTS:
            return
        token = bearer_token()
        if token is None:
            raise AuthenticationError()
        with session_scope() as session:
            user = auth_service.resolve_token(session, token)
        if user is None:
            raise AuthenticationError()
        g.current_user = user
        g.raw_token = token
