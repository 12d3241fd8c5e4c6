"""SQLModel table exports."""

from .balance import Balance, BalanceTransaction, LedgerSource, TransactionType
from .category import Category
from .currency import Currency
from .debt import Debt, DebtPayment, DebtStatus
from .expense import Expense
from .export_history import ExportHistory
from .income import Income
from .lending import Lending, LendingPayment, LendingStatus
from .target import Target, TargetStatus
from .user import ApiToken, User

__all__ = [
    "ApiToken",
    "Balance",
    "BalanceTransaction",
    "Category",
    "Currency",
    "Debt",
    "DebtPayment",
    "DebtStatus",
    "Expense",
    "ExportHistory",
    "Income",
    "LedgerSource",
    "Lending",
    "LendingPayment",
    "LendingStatus",
    "Target",
    "TargetStatus",
    "TransactionType",
    "User",
]
