"""Session-bound SQLModel repository implementations."""

from .balance import SQLModelBalanceRepository
from .category import SQLModelCategoryRepository
from .expense import SQLModelExpenseRepository

__all__ = [
    "SQLModelBalanceRepository",
    "SQLModelCategoryRepository",
    "SQLModelExpenseRepository",
]
