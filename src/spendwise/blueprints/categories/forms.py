"""Category form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ...forms import Form

COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(slots=True)
class CategoryForm(Form):
    """``name`` is the English label; ``name_ar`` defaults to it on create."""

    name: Optional[str] = None
    name_ar: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    def clean(self) -> None:
        if self._wants("name"):
            self.name = self._text("name", required=True, max_length=255)
        if self.has("name_ar"):
            self.name_ar = self._text("name_ar", max_length=255)
        if self._wants("icon"):
            self.icon = self._text("icon", required=True, max_length=50)
        if self._wants("color"):
            self.color = self._text("color", required=True)
            if self.color is not None and not COLOR_RE.match(self.color):
                self._add_error("color", "Color must be a hex value like #A1B2C3.")
