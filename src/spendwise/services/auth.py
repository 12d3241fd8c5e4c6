"""Authentication: argon2 password hashing and opaque bearer tokens."""

from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import Session, select

from ..errors import AuthenticationError, ValidationError
from ..i18n import translate
from ..logging_config import get_logger
from ..models.user import ApiToken, User

logger = get_logger("services.auth")

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHash):
        return False


def _digest(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == _normalize_email(email))).first()


def register_user(session: Session, *, name: str, email: str, password: str) -> User:
    """Create a user with a hashed password; emails are unique (case-insensitive)."""

    if get_user_by_email(session, email) is not None:
        raise ValidationError({"email": [translate("auth.email_exists")]})
    user = User(
        name=name.strip(),
        email=_normalize_email(email),
        password_hash=hash_password(password),
    )
    session.add(user)
    session.flush()
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(session: Session, *, email: str, password: str) -> User:
    user = get_user_by_email(session, email)
    if user is None or not verify_password(user.password_hash, password):
        logger.info("Login rejected")
        raise AuthenticationError("auth.invalid_credentials", code="INVALID_CREDENTIALS")
    if _hasher.check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
    user.last_login = datetime.now(timezone.utc)
    session.add(user)
    session.flush()
    return user


def issue_token(session: Session, user: User, name: str = "api") -> str:
    """Create a bearer token and return the raw value (only its digest is stored)."""

    raw = secrets.token_urlsafe(40)
    session.add(ApiToken(user_id=user.id, token_hash=_digest(raw), name=name))
    session.flush()
    return raw


def resolve_token(session: Session, raw_token: str) -> Optional[User]:
    token = session.exec(select(ApiToken).where(ApiToken.token_hash == _digest(raw_token))).first()
    if token is None:
        return None
    token.last_used_at = datetime.now(timezone.utc)
    session.add(token)
    return session.get(User, token.user_id)


def revoke_token(session: Session, raw_token: str) -> None:
    token = session.exec(select(ApiToken).where(ApiToken.token_hash == _digest(raw_token))).first()
    if token is not None:
        session.delete(token)


def revoke_all_tokens(session: Session, user_id: int) -> None:
    for token in session.exec(select(ApiToken).where(ApiToken.user_id == user_id)).all():
        session.delete(token)


def update_profile(session: Session, user: User, *, name: str, email: str) -> User:
    existing = get_user_by_email(session, email)
    if existing is not None and existing.id != user.id:
        raise ValidationError({"email": [translate("auth.email_exists")]})
    user.name = name.strip()
    user.email = _normalize_email(email)
    session.add(user)
    session.flush()
    return user


def change_password(session: Session, user: User, *, current_password: str, new_password: str) -> None:
    """Replace the password and revoke every token the user holds."""

    if not verify_password(user.password_hash, current_password):
        raise ValidationError({"current_password": [translate("auth.invalid_current_password")]})
    user.password_hash = hash_password(new_password)
    session.add(user)
    revoke_all_tokens(session, user.id)
    session.flush()
    logger.info("Password changed", extra={"user_id": user.id})
