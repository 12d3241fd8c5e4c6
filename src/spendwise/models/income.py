"""Monthly income history."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Income(SQLModel, table=True):
    """Monthly income effective from a given date; superseded rows stay as history."""

    __tablename__: ClassVar[str] = "income"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    monthly_amount: Decimal = Field(max_digits=15, decimal_places=2)
    effective_from: date = Field(nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
