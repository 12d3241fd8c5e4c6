"""JSON shapes for API responses.

Money is always rendered as a two-decimal string; dates as ISO strings.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from .i18n import bilingual, get_locale
from .models import (
    Balance,
    BalanceTransaction,
    Category,
    Currency,
    Debt,
    DebtPayment,
    Expense,
    ExportHistory,
    Income,
    Lending,
    LendingPayment,
    Target,
    User,
)
from .models.debt import DEBT_PRIORITIES
from .money import format_money, format_rate
from .services import debts as debt_service
from .services import lendings as lending_service
from .services.targets import affordability


def iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def user(obj: User, preferred: Optional[Currency] = None) -> dict[str, Any]:
    return {
        "id": obj.id,
        "name": obj.name,
        "email": obj.email,
        "currency": currency(preferred) if preferred is not None else None,
        "created_at": iso(obj.created_at),
        "last_login": iso(obj.last_login),
    }


def balance(obj: Optional[Balance], amount: Decimal) -> dict[str, Any]:
    return {
        "current_balance": format_money(amount),
        "updated_at": iso(obj.updated_at) if obj is not None else None,
    }


def ledger_entry(obj: BalanceTransaction) -> dict[str, Any]:
    return {
        "id": obj.id,
        "type": obj.type.value,
        "amount": format_money(obj.amount),
        "source": obj.source.value,
        "description": obj.description,
        "balance_after": format_money(obj.balance_after),
        "expense_id": obj.expense_id,
        "debt_id": obj.debt_id,
        "lending_id": obj.lending_id,
        "target_id": obj.target_id,
        "created_at": iso(obj.created_at),
    }


def category(obj: Category) -> dict[str, Any]:
    return {
        "id": obj.id,
        "name": {"en": obj.name_en, "ar": obj.name_ar},
        "display_name": obj.display_name(get_locale()),
        "icon": obj.icon,
        "color": obj.color,
        "is_default": obj.is_default,
    }


def expense(obj: Expense) -> dict[str, Any]:
    return {
        "id": obj.id,
        "amount": format_money(obj.amount),
        "date": iso(obj.expense_date),
        "note": obj.note,
        "category": category(obj.category) if obj.category is not None else None,
        "category_id": obj.category_id,
        "created_at": iso(obj.created_at),
        "updated_at": iso(obj.updated_at),
    }


def income(obj: Income) -> dict[str, Any]:
    return {
        "id": obj.id,
        "monthly_amount": format_money(obj.monthly_amount),
        "effective_from": iso(obj.effective_from),
        "created_at": iso(obj.created_at),
    }


def debt_payment(obj: DebtPayment) -> dict[str, Any]:
    return {
        "id": obj.id,
        "debt_id": obj.debt_id,
        "amount": format_money(obj.amount),
        "payment_date": iso(obj.payment_date),
        "payment_method": obj.payment_method,
        "notes": obj.notes,
        "balance_transaction_id": obj.balance_transaction_id,
        "created_at": iso(obj.created_at),
    }


def debt(obj: Debt, *, today: date, with_payments: bool = False) -> dict[str, Any]:
    payload = {
        "id": obj.id,
        "debtor_name": obj.debtor_name,
        "debtor_phone": obj.debtor_phone,
        "debtor_email": obj.debtor_email,
        "total_amount": format_money(obj.total_amount),
        "paid_amount": format_money(obj.paid_amount),
        "remaining_amount": format_money(obj.remaining_amount),
        "progress_percentage": debt_service.progress_percentage(obj),
        "priority": obj.priority,
        "priority_label": DEBT_PRIORITIES.get(obj.priority, obj.priority),
        "payment_type": obj.payment_type,
        "installment_amount": format_money(obj.installment_amount),
        "due_date": iso(obj.due_date),
        "start_date": iso(obj.start_date),
        "status": obj.status.value,
        "is_overdue": obj.is_overdue(today),
        "notes": obj.notes,
        "created_at": iso(obj.created_at),
        "updated_at": iso(obj.updated_at),
    }
    if with_payments:
        payload["payments"] = [debt_payment(payment) for payment in obj.payments]
    return payload


def lending_payment(obj: LendingPayment) -> dict[str, Any]:
    return {
        "id": obj.id,
        "lending_id": obj.lending_id,
        "amount": format_money(obj.amount),
        "payment_date": iso(obj.payment_date),
        "payment_method": obj.payment_method,
        "notes": obj.notes,
        "created_at": iso(obj.created_at),
    }


def lending(obj: Lending, *, today: date, with_payments: bool = False) -> dict[str, Any]:
    payload = {
        "id": obj.id,
        "borrower_name": obj.borrower_name,
        "borrower_phone": obj.borrower_phone,
        "borrower_email": obj.borrower_email,
        "amount": format_money(obj.amount),
        "remaining_amount": format_money(obj.remaining_amount),
        "total_received": format_money(obj.total_received),
        "progress_percentage": lending_service.progress_percentage(obj),
        "currency": obj.currency,
        "description": obj.description,
        "lending_date": iso(obj.lending_date),
        "expected_return_date": iso(obj.expected_return_date),
        "days_until_return": obj.days_until_return(today),
        "is_overdue": obj.is_overdue(today),
        "status": obj.status.value,
        "notes": obj.notes,
        "created_at": iso(obj.created_at),
        "updated_at": iso(obj.updated_at),
    }
    if with_payments:
        payload["payments"] = [lending_payment(payment) for payment in obj.payments]
    return payload


def target(obj: Target, current_balance: Decimal) -> dict[str, Any]:
    check = affordability(obj, current_balance)
    return {
        "id": obj.id,
        "name": obj.name,
        "price": format_money(obj.target_amount),
        "description": obj.description,
        "image_url": obj.image_url,
        "priority": obj.priority,
        "status": obj.status.value,
        "can_afford": check.can_afford,
        "amount_needed": format_money(check.amount_needed),
        "completed_at": iso(obj.completed_at),
        "created_at": iso(obj.created_at),
    }


def export_history(obj: ExportHistory) -> dict[str, Any]:
    return {
        "id": obj.id,
        "format": obj.export_format,
        "date_from": iso(obj.date_from),
        "date_to": iso(obj.date_to),
        "category_id": obj.category_id,
        "record_count": obj.record_count,
        "file_size": obj.file_size,
        "created_at": iso(obj.created_at),
    }


def currency(obj: Currency) -> dict[str, Any]:
    return {
        "id": obj.id,
        "code": obj.code,
        "name": {"en": obj.name_en, "ar": obj.name_ar},
        "display_name": obj.name_ar if get_locale() == "ar" else obj.name_en,
        "symbol": obj.symbol,
        "exchange_rate": format_rate(obj.exchange_rate),
        "is_default": obj.is_default,
        "is_active": obj.is_active,
    }


def source_option(value: str) -> dict[str, Any]:
    return {"value": value, "label": bilingual(f"sources.{value}")}
