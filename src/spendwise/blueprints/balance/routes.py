"""Balance routes: current total, credits and the ledger listing."""

from __future__ import annotations

from ... import serializers
from ...extensions import session_scope
from ...i18n import translate
from ...models.balance import LedgerSource, TransactionType
from ...services import ledger
from ..common import current_user_id, ok, pagination, payload, query_choice
from . import bp
from .forms import AddMoneyForm


@bp.get("")
def show_balance():
    user_id = current_user_id()
    with session_scope() as session:
        balance = ledger.get_or_create_balance(session, user_id, lock=False)
        data = serializers.balance(balance, balance.current_balance)
    return ok(data)


@bp.post("/add")
def add_money():
    """Credit the balance from an external source."""

    form = AddMoneyForm.from_mapping(payload()).validated()
    user_id = current_user_id()
    with session_scope() as session:
        entry = ledger.credit(
            session, user_id, form.amount, form.source, description=form.description
        )
        balance = ledger.get_or_create_balance(session, user_id, lock=False)
        data = {
            "transaction": serializers.ledger_entry(entry),
            "balance": serializers.balance(balance, balance.current_balance),
        }
    return ok(data, translate("balance.added"), 201)


@bp.get("/transactions")
def list_transactions():
    tx_type = query_choice("type", TransactionType)
    source = query_choice("source", LedgerSource)
    with session_scope() as session:
        page = ledger.list_transactions(
            session,
            current_user_id(),
            tx_type=TransactionType(tx_type) if tx_type else None,
            source=LedgerSource(source) if source else None,
            pagination=pagination(),
        )
        data = [serializers.ledger_entry(entry) for entry in page.items]
    return ok(data, meta=page.meta())


@bp.get("/sources")
def list_sources():
    return ok([serializers.source_option(source.value) for source in ledger.credit_sources()])
