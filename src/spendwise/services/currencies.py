"""Display-currency catalog and per-user preference."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlmodel import Session, select

from ..errors import DomainConflict, NotFoundError
from ..models.currency import DEFAULT_CURRENCIES, Currency
from ..models.user import User


def active_currencies(session: Session) -> list[Currency]:
    statement = select(Currency).where(Currency.is_active == True).order_by(Currency.code)  # noqa: E712
    return list(session.exec(statement).all())


def default_currency(session: Session) -> Optional[Currency]:
    return session.exec(select(Currency).where(Currency.is_default == True)).first()  # noqa: E712


def get_currency(session: Session, code_or_id: str | int) -> Currency:
    if isinstance(code_or_id, int) or str(code_or_id).isdigit():
        currency = session.get(Currency, int(code_or_id))
    else:
        currency = session.exec(
            select(Currency).where(Currency.code == str(code_or_id).upper())
        ).first()
    if currency is None:
        raise NotFoundError("currency")
    return currency


def user_currency(session: Session, user: User) -> Optional[Currency]:
    """The user's chosen currency, falling back to the system default."""

    if user.currency_id is not None:
        chosen = session.get(Currency, user.currency_id)
        if chosen is not None and chosen.is_active:
            return chosen
    return default_currency(session)


def set_user_currency(session: Session, user: User, code: str) -> Currency:
    currency = get_currency(session, code)
    if not currency.is_active:
        raise DomainConflict("currency.inactive", code="CURRENCY_INACTIVE", status_code=422)
    user.currency_id = currency.id
    session.add(user)
    session.flush()
    return currency


def seed_default_currencies(session: Session) -> int:
    existing = {code for code in session.exec(select(Currency.code)).all()}
    created = 0
    for code, name_en, name_ar, symbol, rate, is_default in DEFAULT_CURRENCIES:
        if code in existing:
            continue
        session.add(
            Currency(
                code=code,
                name_en=name_en,
                name_ar=name_ar,
                symbol=symbol,
                exchange_rate=Decimal(rate),
                is_default=is_default,
                is_active=True,
            )
        )
        created += 1
    session.flush()
    return created
