"""Service module exports."""

from . import (
    auth,
    categories,
    currencies,
    dashboard,
    debts,
    expenses,
    export_csv,
    incomes,
    ledger,
    lendings,
    targets,
)

__all__ = [
    "auth",
    "categories",
    "currencies",
    "dashboard",
    "debts",
    "expenses",
    "incomes",
    "ledger",
    "lendings",
    "targets",
    "export_csv",
]
