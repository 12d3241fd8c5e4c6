"""SQLModel implementation of the Category repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, or_, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """Session-bound category repository."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self.session.get(Category, category_id)

    def list_for_user(self, user_id: int) -> list[Category]:
        statement = (
            select(Category)
            .where(or_(Category.is_default == True, Category.user_id == user_id))  # noqa: E712
            .order_by(Category.is_default.desc(), Category.name_en)  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def list_defaults(self) -> list[Category]:
        statement = (
            select(Category)
            .where(Category.is_default == True)  # noqa: E712
            .order_by(Category.name_en)
        )
        return list(self.session.exec(statement).all())

    def save(self, category: Category) -> Category:
        self.session.add(category)
        self.session.flush()
        return category

    def delete(self, category: Category) -> None:
        self.session.delete(category)
        self.session.flush()
