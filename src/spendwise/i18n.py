"""Message catalogs and per-request locale selection (English and Arabic)."""

from __future__ import annotations

from typing import Mapping

from flask import Flask, current_app, g, has_request_context, request

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "success.created": "{resource} created successfully",
        "success.updated": "{resource} updated successfully",
        "success.deleted": "{resource} deleted successfully",
        "error.not_found": "{resource} not found",
        "error.route_not_found": "Resource not found",
        "error.unauthorized": "Unauthorized access",
        "error.unauthenticated": "Unauthenticated",
        "error.validation_failed": "Validation failed",
        "error.server_error": "Internal server error",
        "error.bad_request": "Bad request",
        "error.not_implemented": "{format} export is not implemented yet",
        "resources.expense": "Expense",
        "resources.income": "Income",
        "resources.category": "Category",
        "resources.user": "User",
        "resources.debt": "Debt",
        "resources.debt_payment": "Debt payment",
        "resources.lending": "Lending",
        "resources.lending_payment": "Lending payment",
        "resources.target": "Target",
        "resources.currency": "Currency",
        "auth.login_success": "Login successful",
        "auth.logout_success": "Logout successful",
        "auth.register_success": "Registration successful",
        "auth.invalid_credentials": "Invalid email or password",
        "auth.invalid_current_password": "Current password is incorrect",
        "auth.email_exists": "Email already exists",
        "balance.added": "Money added to balance successfully",
        "income.created": "Monthly income set successfully",
        "income.updated": "Monthly income updated successfully",
        "income.deleted": "Income record deleted successfully",
        "income.no_income": "No income set yet",
        "expense.created": "Expense created successfully",
        "expense.updated": "Expense updated successfully",
        "expense.deleted": "Expense deleted successfully",
        "category.created": "Category created successfully",
        "category.updated": "Category updated successfully",
        "category.deleted": "Category deleted successfully",
        "category.cannot_update_default": "Cannot update default categories",
        "category.cannot_delete_default": "Cannot delete default categories",
        "category.has_expenses": "Cannot delete category with existing expenses",
        "debt.created": "Debt created successfully",
        "debt.updated": "Debt updated successfully",
        "debt.deleted": "Debt deleted successfully",
        "debt.payment_recorded": "Payment recorded successfully",
        "debt.payment_exceeds_remaining": "Payment amount exceeds the remaining debt",
        "debt.not_payable": "Payments cannot be recorded on a {status} debt",
        "debt.completed_locked": "A completed debt cannot change its amount or status",
        "lending.created": "Lending recorded successfully",
        "lending.updated": "Lending updated successfully",
        "lending.deleted": "Lending deleted successfully",
        "lending.payment_recorded": "Payment recorded successfully",
        "lending.payment_deleted": "Payment deleted successfully",
        "lending.payment_exceeds_remaining": "Payment amount exceeds the remaining amount",
        "lending.payment_mismatch": "Payment does not belong to this lending",
        "lending.forgiven": "Lending forgiven successfully",
        "lending.forgiven_locked": "A forgiven lending cannot take payments or change its amount or status",
        "target.created": "Target created successfully",
        "target.updated": "Target updated successfully",
        "target.deleted": "Target deleted successfully",
        "target.purchased": "Target purchased successfully! Amount deducted from balance.",
        "target.insufficient_balance": "Insufficient balance to purchase this target",
        "target.not_active": "Only active targets can be purchased",
        "target.completed_locked": "A purchased target cannot change its status",
        "settings.profile_updated": "Profile updated successfully",
        "settings.password_changed": "Password changed successfully. Please login again.",
        "currency.updated": "Currency preference updated successfully",
        "currency.inactive": "Selected currency is not available",
        "export.success": "Data exported successfully",
        "sources.salary": "Salary",
        "sources.freelance": "Freelance",
        "sources.gift": "Gift",
        "sources.investment": "Investment",
        "sources.refund": "Refund",
        "sources.transfer": "Transfer",
        "sources.other": "Other",
    },
    "ar": {
        "success.created": "تم إنشاء {resource} بنجاح",
        "success.updated": "تم تحديث {resource} بنجاح",
        "success.deleted": "تم حذف {resource} بنجاح",
        "error.not_found": "{resource} غير موجود",
        "error.route_not_found": "المورد غير موجود",
        "error.unauthorized": "غير مصرح بالوصول",
        "error.unauthenticated": "غير مصادق",
        "error.validation_failed": "فشل التحقق من البيانات",
        "error.server_error": "خطأ في الخادم",
        "error.bad_request": "طلب غير صالح",
        "resources.expense": "المصروف",
        "resources.income": "الدخل",
        "resources.category": "الفئة",
        "resources.user": "المستخدم",
        "resources.debt": "الدين",
        "resources.lending": "القرض",
        "resources.target": "الهدف",
        "resources.currency": "العملة",
        "auth.login_success": "تم تسجيل الدخول بنجاح",
        "auth.logout_success": "تم تسجيل الخروج بنجاح",
        "auth.register_success": "تم التسجيل بنجاح",
        "auth.invalid_credentials": "البريد الإلكتروني أو كلمة المرور غير صحيحة",
        "auth.invalid_current_password": "كلمة المرور الحالية غير صحيحة",
        "auth.email_exists": "البريد الإلكتروني موجود بالفعل",
        "income.created": "تم تعيين الدخل الشهري بنجاح",
        "income.updated": "تم تحديث الدخل الشهري بنجاح",
        "income.deleted": "تم حذف سجل الدخل بنجاح",
        "income.no_income": "لم يتم تعيين الدخل بعد",
        "expense.created": "تم إنشاء المصروف بنجاح",
        "expense.updated": "تم تحديث المصروف بنجاح",
        "expense.deleted": "تم حذف المصروف بنجاح",
        "category.created": "تم إنشاء الفئة بنجاح",
        "category.updated": "تم تحديث الفئة بنجاح",
        "category.deleted": "تم حذف الفئة بنجاح",
        "category.cannot_update_default": "لا يمكن تحديث الفئات الافتراضية",
        "category.cannot_delete_default": "لا يمكن حذف الفئات الافتراضية",
        "category.has_expenses": "لا يمكن حذف فئة تحتوي على مصروفات",
        "error.not_implemented": "تصدير {format} غير متاح بعد",
        "resources.debt_payment": "دفعة الدين",
        "resources.lending_payment": "دفعة القرض",
        "balance.added": "تمت إضافة المبلغ إلى الرصيد بنجاح",
        "debt.created": "تم إنشاء الدين بنجاح",
        "debt.updated": "تم تحديث الدين بنجاح",
        "debt.deleted": "تم حذف الدين بنجاح",
        "debt.payment_recorded": "تم تسجيل الدفعة بنجاح",
        "debt.payment_exceeds_remaining": "مبلغ الدفعة يتجاوز المبلغ المتبقي من الدين",
        "debt.not_payable": "لا يمكن تسجيل دفعات على دين بحالة {status}",
        "debt.completed_locked": "لا يمكن تغيير مبلغ أو حالة دين مكتمل",
        "lending.created": "تم تسجيل القرض بنجاح",
        "lending.updated": "تم تحديث القرض بنجاح",
        "lending.deleted": "تم حذف القرض بنجاح",
        "lending.payment_recorded": "تم تسجيل الدفعة بنجاح",
        "lending.payment_deleted": "تم حذف الدفعة بنجاح",
        "lending.payment_exceeds_remaining": "مبلغ الدفعة يتجاوز المبلغ المتبقي",
        "lending.payment_mismatch": "الدفعة لا تخص هذا القرض",
        "lending.forgiven": "تم إعفاء القرض بنجاح",
        "lending.forgiven_locked": "لا يمكن تسجيل دفعات على قرض معفى أو تغيير مبلغه أو حالته",
        "target.created": "تم إنشاء الهدف بنجاح",
        "target.updated": "تم تحديث الهدف بنجاح",
        "target.deleted": "تم حذف الهدف بنجاح",
        "target.purchased": "تم شراء الهدف بنجاح! تم خصم المبلغ من الرصيد.",
        "target.insufficient_balance": "الرصيد غير كافٍ لشراء هذا الهدف",
        "target.not_active": "يمكن شراء الأهداف النشطة فقط",
        "target.completed_locked": "لا يمكن تغيير حالة هدف تم شراؤه",
        "settings.profile_updated": "تم تحديث الملف الشخصي بنجاح",
        "settings.password_changed": "تم تغيير كلمة المرور بنجاح. يرجى تسجيل الدخول مرة أخرى.",
        "currency.updated": "تم تحديث تفضيل العملة بنجاح",
        "currency.inactive": "العملة المختارة غير متاحة",
        "export.success": "تم تصدير البيانات بنجاح",
        "sources.salary": "راتب",
        "sources.freelance": "عمل حر",
        "sources.gift": "هدية",
        "sources.investment": "استثمار",
        "sources.refund": "استرداد",
        "sources.transfer": "تحويل",
        "sources.other": "أخرى",
    },
}


def supported_locales() -> tuple[str, ...]:
    return tuple(MESSAGES)


def negotiate_locale(header: str | None, default: str = DEFAULT_LOCALE) -> str:
    """Pick the first supported language from an ``Accept-Language`` header.

    Quality weights are honoured; region subtags (``ar-JO``) match their base language.
    """

    if not header:
        return default

    candidates: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        piece = part.strip()
        if not piece:
            continue
        lang, _, params = piece.partition(";")
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        base = lang.strip().lower().split("-")[0]
        if base in MESSAGES and quality > 0:
            candidates.append((-quality, position, base))

    if not candidates:
        return default
    candidates.sort()
    return candidates[0][2]


def get_locale() -> str:
    if has_request_context():
        return g.get("locale", DEFAULT_LOCALE)
    return DEFAULT_LOCALE


def translate(key: str, locale: str | None = None, **params: object) -> str:
    """Look up ``key`` in the active catalog, falling back to English then the key itself."""

    locale = locale or get_locale()
    template = MESSAGES.get(locale, {}).get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    if not params:
        return template
    return template.format(**params)


def bilingual(key: str) -> Mapping[str, str]:
    """Return ``{"en": ..., "ar": ...}`` labels for ``key``."""

    return {locale: translate(key, locale) for locale in MESSAGES}


def init_app(app: Flask) -> None:
    """Register the per-request locale hook."""

    @app.before_request
    def _select_locale() -> None:
        default = current_app.config.get("DEFAULT_LOCALE", DEFAULT_LOCALE)
        g.locale = negotiate_locale(request.headers.get("Accept-Language"), default)

    @app.after_request
    def _content_language(response):
        response.headers.setdefault("Content-Language", get_locale())
        return response
