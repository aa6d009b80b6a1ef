from __future__ import annotations

import builtins
import uuid

from sqlalchemy.orm import Session

from projecthub.logging import get_logger
from projecthub.models.activity import ActivityEntityType, ActivityLog
from projecthub.models.user import User
from projecthub.schemas.feeds import ActivityLogCreate
from projecthub.services.common import apply_pagination, apply_search, get_or_404

logger = get_logger(__name__)

ACTIVITY_NOT_FOUND = "Activity log not found"


class ActivityLogs:
    """Audit entries are append-only; there is deliberately no update."""

    @staticmethod
    def create(db: Session, payload: ActivityLogCreate) -> ActivityLog:
        get_or_404(db, User, payload.user_id, "User not found")
        entry = ActivityLog(**payload.model_dump())
        db.add(entry)
        db.commit()
        db.refresh(entry)
        logger.info(
            "activity_logged user_id=%s action=%s entity_type=%s",
            entry.user_id,
            entry.action,
            entry.entity_type.value,
        )
        return entry

    @staticmethod
    def get(db: Session, activity_id: str) -> ActivityLog:
        return get_or_404(db, ActivityLog, activity_id, ACTIVITY_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        user_id: uuid.UUID | None = None,
        entity_type: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[ActivityLog], int]:
        query = apply_search(db.query(ActivityLog), search, (ActivityLog.action,))
        if user_id:
            query = query.filter(ActivityLog.user_id == user_id)
        if entity_type:
            try:
                query = query.filter(ActivityLog.entity_type == ActivityEntityType(entity_type))
            except ValueError:
                return [], 0
        total = query.count()
        items = apply_pagination(query.order_by(ActivityLog.created_at.desc()), limit, offset).all()
        return items, total

    @staticmethod
    def delete(db: Session, activity_id: str) -> None:
        entry = get_or_404(db, ActivityLog, activity_id, ACTIVITY_NOT_FOUND)
        db.delete(entry)
        db.commit()
