"""Currencies blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("currencies", __name__, url_prefix="/currencies")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
