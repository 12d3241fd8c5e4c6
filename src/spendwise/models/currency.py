"""Display currencies and their exchange rates against the base currency."""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Currency(SQLModel, table=True):
    """Currency the user can choose for display; rates carry six decimals."""

    __tablename__: ClassVar[str] = "currency"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(nullable=False, unique=True, index=True, max_length=3)
    name_en: str = Field(nullable=False, max_length=64)
    name_ar: str = Field(nullable=False, max_length=64)
    symbol: str = Field(nullable=False, max_length=8)
    exchange_rate: Decimal = Field(default=Decimal("1.000000"), max_digits=12, decimal_places=6)
    is_default: bool = Field(default=False, nullable=False)
    is_active: bool = Field(default=True, nullable=False, index=True)


# (code, en, ar, symbol, rate, is_default)
DEFAULT_CURRENCIES: tuple[tuple[str, str, str, str, str, bool], ...] = (
    ("JOD", "Jordanian Dinar", "دينار أردني", "JD", "1.000000", True),
    ("USD", "US Dollar", "دولار أمريكي", "$", "0.709220", False),
    ("EUR", "Euro", "يورو", "€", "0.769231", False),
)
