"""Savings targets the user can purchase once affordable."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class TargetStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TARGET_PRIORITIES: tuple[str, ...] = ("low", "medium", "high")


class Target(SQLModel, table=True):
    """Savings goal priced at ``target_amount`` (exposed as ``price``)."""

    __tablename__: ClassVar[str] = "target"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=255)
    target_amount: Decimal = Field(max_digits=15, decimal_places=2)
    description: Optional[str] = Field(default=None, max_length=1000)
    image_url: Optional[str] = Field(default=None, max_length=500)
    priority: str = Field(default="medium", max_length=8)
    status: TargetStatus = Field(default=TargetStatus.ACTIVE, nullable=False, index=True)
    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
