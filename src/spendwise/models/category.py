"""Expense categories: system defaults plus user-owned custom entries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Category(SQLModel, table=True):
    """Bilingual expense category; ``user_id`` is ``None`` for defaults."""

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    name_en: str = Field(nullable=False, max_length=255, index=True)
    name_ar: str = Field(nullable=False, max_length=255)
    icon: str = Field(nullable=False, max_length=64)
    color: str = Field(nullable=False, max_length=7)
    is_default: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def display_name(self, locale: str = "en") -> str:
        return self.name_ar if locale == "ar" and self.name_ar else self.name_en

    def visible_to(self, user_id: int) -> bool:
        return self.is_default or self.user_id == user_id


# (en, ar, icon, color)
DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("Food", "طعام", "restaurant", "#FF6B6B"),
    ("Transport", "مواصلات", "directions_car", "#4ECDC4"),
    ("Bills", "فواتير", "receipt", "#45B7D1"),
    ("Shopping", "تسوق", "shopping_bag", "#96CEB4"),
    ("Entertainment", "ترفيه", "movie", "#FFEAA7"),
    ("Health", "صحة", "local_hospital", "#DFE6E9"),
    ("Education", "تعليم", "school", "#A29BFE"),
    ("Other", "أخرى", "category", "#907B60"),
)
