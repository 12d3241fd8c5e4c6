"""Savings target form."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, Optional

from ...forms import Form
from ...models.target import TARGET_PRIORITIES
from ...services.targets import EDITABLE_STATUSES

MAX_PRICE = Decimal("999999999.99")


@dataclass(slots=True)
class TargetForm(Form):
    """The price is accepted as ``price`` and stored as ``target_amount``."""

    FIELDS: ClassVar[tuple[str, ...]] = (
        "name",
        "price",
        "description",
        "image_url",
        "priority",
        "status",
    )

    name: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None

    def clean(self) -> None:
        if self._wants("name"):
            self.name = self._text("name", required=True, max_length=255)
        if self._wants("price"):
            self.price = self._money("price", maximum=MAX_PRICE)
        if self.has("description"):
            self.description = self._text("description", max_length=1000)
        if self.has("image_url"):
            self.image_url = self._text("image_url", max_length=500)
        if self._wants("priority"):
            self.priority = self._choice("priority", TARGET_PRIORITIES, default="medium")
        if self.partial and self.has("status"):
            self.status = self._choice(
                "status", [status.value for status in EDITABLE_STATUSES], required=True
            )

    def service_kwargs(self) -> dict[str, Any]:
        changes = self.changes()
        if "price" in changes:
            changes["target_amount"] = changes.pop("price")
        return changes
