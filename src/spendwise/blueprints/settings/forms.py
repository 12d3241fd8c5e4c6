"""Profile and password forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...forms import Form
from ...services.auth import MIN_PASSWORD_LENGTH


@dataclass(slots=True)
class ProfileForm(Form):
    name: Optional[str] = None
    email: Optional[str] = None

    def clean(self) -> None:
        self.name = self._text("name", required=True, max_length=255)
        self.email = self._email("email", required=True)


@dataclass(slots=True)
class PasswordForm(Form):
    current_password: Optional[str] = None
    new_password: Optional[str] = None

    def clean(self) -> None:
        self.current_password = self._text("current_password", required=True)
        self.new_password = self._text("new_password", required=True)
        if self.new_password is None:
            return
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            self._add_error(
                "new_password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        elif self.raw_data.get("new_password_confirmation") != self.new_password:
            self._add_error("new_password", "Password confirmation does not match.")
