"""Soft-deletable expense records."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .category import Category


class Expense(SQLModel, table=True):
    """A single spend against a category; ``deleted_at`` marks soft removal."""

    __tablename__: ClassVar[str] = "expense"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    amount: Decimal = Field(max_digits=15, decimal_places=2)
    expense_date: date = Field(nullable=False, index=True)
    note: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    deleted_at: Optional[datetime] = Field(default=None, index=True)

    category: "Category" = Relationship(
        sa_relationship=relationship("Category", lazy="joined"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
