"""Shared request-form base: binding, typed parsing and error collection.

Blueprint forms subclass :class:`Form` and implement ``clean`` using the
``_money``/``_date``/``_text``/... helpers. Partial forms (PUT) only parse
the keys that are present in the payload.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Iterable, Optional

from .errors import ValidationError
from .money import to_money

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(slots=True)
class Form:
    """Base request form with per-field error lists."""

    FIELDS: ClassVar[tuple[str, ...]] = ()

    partial: bool = field(default=False, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, *, partial: bool = False):
        """Create a form populated from request data."""

        form = cls()
        form.partial = partial
        form.load(data or {})
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = dict(data)

    def clean(self) -> None:  # pragma: no cover - overridden
        raise NotImplementedError

    def validate(self) -> bool:
        """Run ``clean`` and return True when no field errors were collected."""

        self.errors.clear()
        self.clean()
        return not self.errors

    def validated(self):
        """Validate or raise :class:`ValidationError` carrying the field errors."""

        if not self.validate():
            raise ValidationError(self.errors)
        return self

    def changes(self, names: Iterable[str] | None = None) -> dict[str, Any]:
        """Cleaned values for the fields present in the payload."""

        return {name: getattr(self, name) for name in (names or self.FIELDS) if self.has(name)}

    # -- helpers -----------------------------------------------------------------

    def has(self, key: str) -> bool:
        return key in self.raw_data

    def _wants(self, key: str) -> bool:
        return not self.partial or self.has(key)

    def _add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)

    def _raw(self, key: str) -> Any:
        value = self.raw_data.get(key)
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                return None
        return value

    def _money(
        self,
        key: str,
        *,
        required: bool = True,
        minimum: Decimal = Decimal("0.01"),
        maximum: Optional[Decimal] = None,
    ) -> Optional[Decimal]:
        value = self._raw(key)
        if value is None:
            if required:
                self._add_error(key, "This field is required.")
            return None
        if isinstance(value, bool):
            self._add_error(key, "Enter a valid number.")
            return None
        try:
            Decimal(str(value))
            parsed = to_money(value)
        except (InvalidOperation, ValueError):
            self._add_error(key, "Enter a valid number.")
            return None
        if parsed < minimum:
            if minimum > 0:
                self._add_error(key, f"Amount must be at least {minimum}.")
            else:
                self._add_error(key, "Amount must be at least zero.")
            return None
        if maximum is not None and parsed > maximum:
            self._add_error(key, f"Amount may not be greater than {maximum}.")
            return None
        return parsed

    def _date(self, key: str, *, required: bool = True) -> Optional[date]:
        value = self._raw(key)
        if value is None:
            if required:
                self._add_error(key, "This field is required.")
            return None
        if isinstance(value, date) and not isinstance(value, datetime):
            return value
        try:
            return datetime.strptime(str(value), "%Y-%m-%d").date()
        except ValueError:
            self._add_error(key, "Enter a valid date (YYYY-MM-DD).")
            return None

    def _text(
        self, key: str, *, required: bool = False, max_length: Optional[int] = None
    ) -> Optional[str]:
        value = self._raw(key)
        if value is None:
            if required:
                self._add_error(key, "This field is required.")
            return None
        if not isinstance(value, str):
            self._add_error(key, "Must be a string.")
            return None
        if max_length is not None and len(value) > max_length:
            self._add_error(key, f"May not be greater than {max_length} characters.")
            return None
        return value

    def _email(self, key: str, *, required: bool = False) -> Optional[str]:
        value = self._text(key, required=required, max_length=255)
        if value is not None and not EMAIL_RE.match(value):
            self._add_error(key, "Enter a valid email address.")
            return None
        return value

    def _choice(
        self,
        key: str,
        choices: Iterable[str],
        *,
        required: bool = False,
        default: Optional[str] = None,
    ) -> Optional[str]:
        value = self._raw(key)
        if value is None:
            if required:
                self._add_error(key, "This field is required.")
            return default
        allowed = tuple(choices)
        value = str(value)
        if value not in allowed:
            self._add_error(key, f"Choose one of: {', '.join(allowed)}.")
            return default
        return value

    def _bool(self, key: str, *, default: bool) -> bool:
        value = self.raw_data.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        text = str(value).strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        self._add_error(key, "Must be true or false.")
        return default

    def _int(self, key: str, *, required: bool = False) -> Optional[int]:
        value = self._raw(key)
        if value is None:
            if required:
                self._add_error(key, "This field is required.")
            return None
        if isinstance(value, bool):
            self._add_error(key, "Must be an integer.")
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            self._add_error(key, "Must be an integer.")
            return None


def query_int(args: Mapping[str, Any], key: str, default: int, *, minimum: int = 1, maximum: int = 100) -> int:
    """Parse a bounded integer query parameter, falling back to ``default``."""

    try:
        value = int(args.get(key, default))
    except (TypeError, ValueError):
        return default
    return max(minimum, min(value, maximum))
