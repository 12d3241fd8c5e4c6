"""Forms for registration and login."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...forms import Form
from ...services.auth import MIN_PASSWORD_LENGTH


@dataclass(slots=True)
class RegisterForm(Form):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    def clean(self) -> None:
        self.name = self._text("name", required=True, max_length=255)
        self.email = self._email("email", required=True)
        self.password = self._text("password", required=True)
        confirmation = self.raw_data.get("password_confirmation")
        if self.password is not None:
            if len(self.password) < MIN_PASSWORD_LENGTH:
                self._add_error(
                    "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
                )
            elif confirmation != self.password:
                self._add_error("password", "Password confirmation does not match.")


@dataclass(slots=True)
class LoginForm(Form):
    email: Optional[str] = None
    password: Optional[str] = None

    def clean(self) -> None:
        self.email = self._email("email", required=True)
        self.password = self._text("password", required=True)
