"""Blueprint exports."""

from . import (
    auth,
    balance,
    categories,
    currencies,
    dashboard,
    debts,
    expenses,
    export,
    income,
    lendings,
    settings,
    targets,
)

__all__ = [
    "auth",
    "balance",
    "categories",
    "currencies",
    "dashboard",
    "debts",
    "expenses",
    "export",
    "income",
    "lendings",
    "settings",
    "targets",
]
