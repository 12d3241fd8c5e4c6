"""Pytest configuration and shared fixtures for SpendWise tests.

This module provides database fixtures, test data factories, and helper utilities
for testing the ledger, services and routes without touching a real database.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlmodel import Session, select

from spendwise import create_app
from spendwise.config import TestConfig
from spendwise.infra.database import create_db_engine, init_database
from spendwise.models import Category, Expense, User
from spendwise.services import expenses as expense_service
from spendwise.services import ledger
from spendwise.services.categories import seed_default_categories

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path, monkeypatch):
    """Create an isolated SQLite database file for each test.

    The engine is built through the same configuration path the app uses, so
    SQLite pragmas (foreign keys) are active.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    monkeypatch.setenv("SPENDWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    engine = create_db_engine(TestConfig())
    init_database(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test.

    Yields:
        Session: SQLModel session for test
    """
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(db_session):
    """Factory for creating users with distinct emails."""

    counter = {"n": 0}

    def _create_user(name: str = "Tester", email: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"user{counter['n']}@example.com",
            password_hash="not-a-real-hash",
        )
        db_session.add(user)
        db_session.flush()
        return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory(name="Tester", email="tester@example.com")


@pytest.fixture
def other_user(user_factory) -> User:
    return user_factory(name="Someone Else", email="other@example.com")


@pytest.fixture
def default_categories(db_session) -> list[Category]:
    seed_default_categories(db_session)
    return list(
        db_session.exec(
            select(Category).where(Category.is_default == True)  # noqa: E712
        ).all()
    )


@pytest.fixture
def category_factory(db_session, user):
    """Factory for creating custom categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create_category(
        name: str = "Groceries",
        color: str = "#FF5733",
        icon: str = "cart",
        owner: User | None = None,
        is_default: bool = False,
    ) -> Category:
        owner = owner or user
        category = Category(
            user_id=None if is_default else owner.id,
            name_en=name,
            name_ar=name,
            icon=icon,
            color=color,
            is_default=is_default,
        )
        db_session.add(category)
        db_session.flush()
        return category

    return _create_category


@pytest.fixture
def fund(db_session, user):
    """Credit a user's balance (salary) and return the ledger entry."""

    def _fund(amount: str | Decimal, owner: User | None = None):
        owner = owner or user
        return ledger.credit(db_session, owner.id, amount, "salary")

    return _fund


@pytest.fixture
def expense_factory(db_session, user, category_factory):
    """Factory creating expenses through the service, so the ledger is debited.

    Returns:
        Callable: Function that creates and persists Expense instances
    """

    state: dict[str, Category] = {}

    def _create_expense(
        amount: str | Decimal = "10.00",
        expense_date: date | None = None,
        note: str | None = None,
        category: Category | None = None,
        owner: User | None = None,
    ) -> Expense:
        owner = owner or user
        if category is None:
            if "default" not in state:
                state["default"] = category_factory(owner=owner)
            category = state["default"]
        return expense_service.create_expense(
            db_session,
            owner.id,
            category_id=category.id,
            amount=amount,
            expense_date=expense_date or date.today(),
            note=note,
        )

    return _create_expense


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("SPENDWISE_SECRET_KEY", "test-secret")
    application = create_app("testing")
    yield application
    application.extensions["spendwise.engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    """Register a user through the API and return bearer headers."""

    def _register(email: str = "api@example.com", password: str = "secret-pass-1"):
        response = client.post(
            "/auth/register",
            json={
                "name": "Api User",
                "email": email,
                "password": password,
                "password_confirmation": password,
            },
        )
        assert response.status_code == 201, response.get_json()
        token = response.get_json()["data"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _register
