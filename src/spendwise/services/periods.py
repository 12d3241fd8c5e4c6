"""Calendar-month helpers used by summaries and dashboards."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class Month:
    year: int
    month: int

    @classmethod
    def of(cls, day: date) -> "Month":
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, value: str) -> "Month":
        """Parse ``YYYY-MM``; raises ``ValueError`` on anything else."""

        year_text, sep, month_text = value.strip().partition("-")
        if not sep or len(year_text) != 4 or len(month_text) != 2:
            raise ValueError(f"Invalid month: {value!r}")
        month = cls(int(year_text), int(month_text))
        if not 1 <= month.month <= 12:
            raise ValueError(f"Invalid month: {value!r}")
        return month

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days)

    def shift(self, months: int) -> "Month":
        index = self.year * 12 + (self.month - 1) + months
        return Month(index // 12, index % 12 + 1)

    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def display_name(self) -> str:
        return f"{calendar.month_abbr[self.month]} {self.year}"
