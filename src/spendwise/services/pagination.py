"""Pagination helpers shared by listing endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class Pagination:
    """Requested page window."""

    page: int = 1
    per_page: int = 15

    def __post_init__(self) -> None:
        self.page = max(1, int(self.page))
        self.per_page = max(1, min(int(self.per_page), 100))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One page of results plus the totals needed to render pagination metadata."""

    items: Sequence[T]
    page: int
    per_page: int
    total: int

    @property
    def last_page(self) -> int:
        """Return the total number of pages (at least 1)."""

        if self.total == 0:
            return 1
        return ceil(self.total / self.per_page)

    def meta(self) -> dict[str, int]:
        return {
            "current_page": self.page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
        }
