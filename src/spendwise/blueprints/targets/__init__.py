"""Targets blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("targets", __name__, url_prefix="/targets")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
