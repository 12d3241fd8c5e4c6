"""Ownership lookups shared by the entity services."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from sqlmodel import Session, SQLModel

from ..errors import AuthorizationError, NotFoundError

ModelT = TypeVar("ModelT", bound=SQLModel)


def get_owned(
    session: Session,
    model: type[ModelT],
    entity_id: int,
    user_id: int,
    *,
    resource: str,
    loader: Optional[Callable[[int], Optional[ModelT]]] = None,
) -> ModelT:
    """Load ``model`` by id, raising 404 when missing and 403 when owned by someone else.

    ``loader`` replaces the primary-key lookup; a ``None`` from it is a 404.
    """

    obj = loader(entity_id) if loader is not None else session.get(model, entity_id)
    if obj is None:
        raise NotFoundError(resource)
    if getattr(obj, "user_id", None) != user_id:
        raise AuthorizationError()
    return obj
