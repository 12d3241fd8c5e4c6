"""Database and extension wiring for SpendWise."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import Flask
from sqlalchemy.engine import Engine
from sqlmodel import Session

from . import models  # noqa: F401  # ensure models registered with SQLModel metadata
from .config import BaseConfig
from .infra import database

_engine: Engine | None = None


def init_db(app: Flask) -> Engine:
    """Initialize the SQLModel engine using configuration from the app."""

    config: BaseConfig = app.config["SPENDWISE_CONFIG"]
    engine = database.create_db_engine(config)
    database.init_database(engine)
    _seed_reference_data(engine)

    global _engine
    _engine = engine
    app.extensions["spendwise.engine"] = engine
    return engine


def _seed_reference_data(engine: Engine) -> None:
    """Make sure the default categories and currencies exist."""

    from .services.categories import seed_default_categories
    from .services.currencies import seed_default_currencies

    with database.session_scope(engine) as session:
        seed_default_categories(session)
        seed_default_currencies(session)


def get_engine() -> Engine:
    """Return the initialized SQLModel engine."""

    if _engine is None:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Database engine not initialized")
    return _engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around one request's unit of work."""

    with database.session_scope(get_engine()) as session:
        yield session
