from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from projecthub.errors import ConflictError, NotFoundError
from projecthub.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


def coerce_uuid(value: Any) -> uuid.UUID | None:
    """Return ``value`` as a UUID, or ``None`` when it cannot be one."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def get_or_404(db: Session, model: type[ModelT], entity_id: Any, detail: str | None = None) -> ModelT:
    key = coerce_uuid(entity_id)
    entity = db.get(model, key) if key is not None else None
    if entity is None:
        raise NotFoundError(detail or f"{model.__name__} not found")
    return entity


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(query: Query, search: str | None, columns: Sequence[Any]) -> Query:
    """Case-insensitive substring match of ``search`` against any of ``columns``."""
    if not search or not search.strip():
        return query
    pattern = f"%{escape_like(search.strip())}%"
    return query.filter(or_(*(column.ilike(pattern, escape="\\") for column in columns)))


def apply_pagination(query: Query, limit: int, offset: int) -> Query:
    return query.limit(limit).offset(offset)


def commit_or_conflict(db: Session, detail: str) -> None:
    """Commit, turning a unique-constraint race into a 409."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("integrity_conflict detail=%s error=%s", detail, exc.orig)
        raise ConflictError(detail) from exc
