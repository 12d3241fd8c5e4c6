"""Audit rows written once per export request."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class ExportHistory(SQLModel, table=True):
    __tablename__: ClassVar[str] = "export_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    export_format: str = Field(nullable=False, max_length=16)
    date_from: Optional[date] = Field(default=None)
    date_to: Optional[date] = Field(default=None)
    category_id: Optional[int] = Field(default=None)
    record_count: int = Field(default=0, nullable=False)
    file_size: int = Field(default=0, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
