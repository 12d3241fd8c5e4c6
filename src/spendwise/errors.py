"""Domain exception taxonomy and the JSON failure envelope."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .i18n import translate
from .logging_config import get_logger

logger = get_logger("errors")

FieldErrors = Mapping[str, list[str]]


class SpendWiseError(Exception):
    """Base class for errors that map onto an HTTP failure envelope."""

    status_code = 400
    code = "BAD_REQUEST"
    message_key = "error.bad_request"

    def __init__(
        self,
        message_key: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        if message_key is not None:
            self.message_key = message_key
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.params = dict(params or {})
        super().__init__(self.message_key)

    @property
    def message(self) -> str:
        """Message rendered in the active request locale."""

        return translate(self.message_key, **self.params)

    def details(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(SpendWiseError):
    """Malformed or missing input; carries per-field messages."""

    status_code = 422
    code = "VALIDATION_ERROR"
    message_key = "error.validation_failed"

    def __init__(self, errors: FieldErrors | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.errors = {field: list(messages) for field, messages in (errors or {}).items()}

    def details(self) -> dict[str, Any]:
        payload = super().details()
        if self.errors:
            payload["fields"] = self.errors
        return payload


class AuthenticationError(SpendWiseError):
    status_code = 401
    code = "UNAUTHENTICATED"
    message_key = "error.unauthenticated"


class AuthorizationError(SpendWiseError):
    """The acting user does not own the referenced entity."""

    status_code = 403
    code = "UNAUTHORIZED"
    message_key = "error.unauthorized"


class NotFoundError(SpendWiseError):
    status_code = 404
    code = "NOT_FOUND"
    message_key = "error.not_found"

    def __init__(self, resource: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.resource = resource

    @property
    def message(self) -> str:
        return translate(self.message_key, resource=translate(f"resources.{self.resource}"))


class DomainConflict(SpendWiseError):
    """Business-rule violation that is not a plain input error."""

    status_code = 409
    code = "CONFLICT"


def failure_envelope(message: str, *, details: Mapping[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message}
    if details is not None:
        payload["error"] = dict(details)
    return payload


def _http_code(exc: HTTPException) -> str:
    name = exc.name or "HTTP Error"
    return name.upper().replace(" ", "_").replace("'", "")


def register_error_handlers(app: Flask) -> None:
    """Render every failure through the shared JSON envelope."""

    @app.errorhandler(SpendWiseError)
    def _handle_domain_error(exc: SpendWiseError):
        if exc.status_code >= 500:
            logger.error("Domain error", extra={"code": exc.code})
        else:
            logger.info("Request rejected", extra={"code": exc.code, "status": exc.status_code})
        return jsonify(failure_envelope(exc.message, details=exc.details())), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        status = exc.code or 500
        if status == 404:
            message = translate("error.route_not_found")
        else:
            message = exc.description or exc.name
        details = {"code": _http_code(exc), "message": message}
        return jsonify(failure_envelope(message, details=details)), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error while serving request")
        message = translate("error.server_error")
        details = {"code": "SERVER_ERROR", "message": message}
        return jsonify(failure_envelope(message, details=details)), 500
