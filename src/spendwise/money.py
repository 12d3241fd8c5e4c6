"""Exact decimal helpers for monetary values.

Amounts are stored as ``Numeric(15, 2)`` and handled as ``Decimal`` end to end;
strings with exactly two fractional digits are produced only at the JSON
boundary. Exchange rates carry six fractional digits.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

TWO_PLACES = Decimal("0.01")
SIX_PLACES = Decimal("0.000001")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_money(value: Any) -> Decimal:
    """Return ``value`` as a Decimal quantized to cents.

    Floats are routed through ``str`` so ``0.1`` becomes ``Decimal("0.10")``
    rather than its binary expansion.
    """

    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError("Boolean is not a monetary amount")
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid monetary amount: {value!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid monetary amount: {value!r}")
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_rate(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(SIX_PLACES, rounding=ROUND_HALF_UP)


def format_money(value: Any) -> str | None:
    """Render an amount as a fixed two-digit string (``None`` passes through)."""

    if value is None:
        return None
    return f"{to_money(value):.2f}"


def format_rate(value: Any) -> str | None:
    if value is None:
        return None
    return f"{to_rate(value):.6f}"


def percentage(part: Any, whole: Any) -> float:
    """Return ``part / whole * 100`` rounded to two places, or 0 when ``whole`` is zero."""

    whole_dec = to_money(whole)
    if whole_dec == 0:
        return 0.0
    ratio = (to_money(part) / whole_dec * HUNDRED).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(ratio)
