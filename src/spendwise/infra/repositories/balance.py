"""SQLModel implementation of the Balance repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.balance import Balance, BalanceTransaction, LedgerSource, TransactionType


class SQLModelBalanceRepository:
    """Session-bound balance repository; the caller owns the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_for_update(self, user_id: int) -> Optional[Balance]:
        # FOR UPDATE is dropped by the SQLite dialect, which serializes writers itself.
        statement = select(Balance).where(Balance.user_id == user_id).with_for_update()
        return self.session.exec(statement).first()

    def get(self, user_id: int) -> Optional[Balance]:
        return self.session.exec(select(Balance).where(Balance.user_id == user_id)).first()

    def save_balance(self, balance: Balance) -> Balance:
        self.session.add(balance)
        self.session.flush()
        return balance

    def append_entry(self, entry: BalanceTransaction) -> BalanceTransaction:
        if entry.id is not None:
            raise ValueError("Ledger entries are append-only")
        self.session.add(entry)
        self.session.flush()
        return entry

    def _filtered(self, statement, user_id, tx_type, source):
        statement = statement.where(BalanceTransaction.user_id == user_id)
        if tx_type is not None:
            statement = statement.where(BalanceTransaction.type == tx_type)
        if source is not None:
            statement = statement.where(BalanceTransaction.source == source)
        return statement

    def list_entries(
        self,
        user_id: int,
        *,
        tx_type: Optional[TransactionType] = None,
        source: Optional[LedgerSource] = None,
        limit: int = 15,
        offset: int = 0,
    ) -> list[BalanceTransaction]:
        statement = self._filtered(select(BalanceTransaction), user_id, tx_type, source)
        statement = (
            statement.order_by(
                BalanceTransaction.created_at.desc(),  # type: ignore
                BalanceTransaction.id.desc(),  # type: ignore
            )
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def count_entries(
        self,
        user_id: int,
        *,
        tx_type: Optional[TransactionType] = None,
        source: Optional[LedgerSource] = None,
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(BalanceTransaction), user_id, tx_type, source
        )
        return int(self.session.exec(statement).one())

    def entries_in_order(self, user_id: int) -> list[BalanceTransaction]:
        """All of a user's entries oldest first (replay order)."""

        statement = (
            select(BalanceTransaction)
            .where(BalanceTransaction.user_id == user_id)
            .order_by(BalanceTransaction.id)  # type: ignore
        )
        return list(self.session.exec(statement).all())
