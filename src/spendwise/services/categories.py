"""Category management: defaults are shared and read-only, custom ones are per user."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session

from ..errors import AuthorizationError, DomainConflict, NotFoundError
from ..infra.repositories import SQLModelCategoryRepository, SQLModelExpenseRepository
from ..logging_config import get_logger
from ..models.category import DEFAULT_CATEGORIES, Category

logger = get_logger("services.categories")


def list_categories(session: Session, user_id: int) -> list[Category]:
    return SQLModelCategoryRepository(session).list_for_user(user_id)


def get_visible_category(session: Session, category_id: int, user_id: int) -> Category:
    """Return a default or user-owned category, else 404/403."""

    category = SQLModelCategoryRepository(session).get_by_id(category_id)
    if category is None:
        raise NotFoundError("category")
    if not category.visible_to(user_id):
        raise AuthorizationError()
    return category


def create_category(
    session: Session,
    user_id: int,
    *,
    name_en: str,
    name_ar: Optional[str],
    icon: str,
    color: str,
) -> Category:
    category = Category(
        user_id=user_id,
        name_en=name_en,
        name_ar=name_ar or name_en,
        icon=icon,
        color=color.upper(),
        is_default=False,
    )
    SQLModelCategoryRepository(session).save(category)
    logger.info("Category created", extra={"user_id": user_id, "category_id": category.id})
    return category


def update_category(
    session: Session,
    category_id: int,
    user_id: int,
    *,
    name_en: Optional[str] = None,
    name_ar: Optional[str] = None,
    icon: Optional[str] = None,
    color: Optional[str] = None,
) -> Category:
    category = get_visible_category(session, category_id, user_id)
    if category.is_default:
        raise DomainConflict(
            "category.cannot_update_default", code="CANNOT_UPDATE_DEFAULT", status_code=403
        )
    if name_en is not None:
        category.name_en = name_en
    if name_ar is not None:
        category.name_ar = name_ar
    if icon is not None:
        category.icon = icon
    if color is not None:
        category.color = color.upper()
    return SQLModelCategoryRepository(session).save(category)


def delete_category(session: Session, category_id: int, user_id: int) -> None:
    """Delete a custom category that no expense references.

    Soft-deleted expenses still hold their category, so they count too.
    """

    category = get_visible_category(session, category_id, user_id)
    if category.is_default:
        raise DomainConflict(
            "category.cannot_delete_default", code="CANNOT_DELETE_DEFAULT", status_code=403
        )
    if SQLModelExpenseRepository(session).count_for_category(category.id, include_deleted=True):
        raise DomainConflict(
            "category.has_expenses", code="CATEGORY_HAS_EXPENSES", status_code=409
        )
    SQLModelCategoryRepository(session).delete(category)
    logger.info("Category deleted", extra={"user_id": user_id, "category_id": category_id})


def seed_default_categories(session: Session) -> int:
    """Insert any missing default categories; returns how many were created."""

    repo = SQLModelCategoryRepository(session)
    existing = {category.name_en for category in repo.list_defaults()}
    created = 0
    for name_en, name_ar, icon, color in DEFAULT_CATEGORIES:
        if name_en in existing:
            continue
        repo.save(
            Category(
                user_id=None,
                name_en=name_en,
                name_ar=name_ar,
                icon=icon,
                color=color,
                is_default=True,
            )
        )
        created += 1
    return created
