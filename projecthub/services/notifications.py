from __future__ import annotations

import builtins
import uuid

from sqlalchemy.orm import Session

from projecthub.logging import get_logger
from projecthub.models.notification import Notification
from projecthub.models.user import User
from projecthub.schemas.feeds import NotificationCreate
from projecthub.services.common import apply_pagination, apply_search, get_or_404

logger = get_logger(__name__)

NOTIFICATION_NOT_FOUND = "Notification not found"


class Notifications:
    @staticmethod
    def create(db: Session, payload: NotificationCreate) -> Notification:
        get_or_404(db, User, payload.user_id, "User not found")
        notification = Notification(**payload.model_dump())
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def get(db: Session, notification_id: str) -> Notification:
        return get_or_404(db, Notification, notification_id, NOTIFICATION_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        user_id: uuid.UUID | None = None,
        is_read: bool | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[Notification], int]:
        query = apply_search(db.query(Notification), search, (Notification.message,))
        if user_id:
            query = query.filter(Notification.user_id == user_id)
        if is_read is not None:
            query = query.filter(Notification.is_read.is_(is_read))
        total = query.count()
        items = apply_pagination(query.order_by(Notification.created_at.desc()), limit, offset).all()
        return items, total

    @staticmethod
    def mark_read(db: Session, notification_id: str) -> Notification:
        notification = get_or_404(db, Notification, notification_id, NOTIFICATION_NOT_FOUND)
        if not notification.is_read:
            notification.is_read = True
            db.commit()
            db.refresh(notification)
        return notification

    @staticmethod
    def delete(db: Session, notification_id: str) -> None:
        notification = get_or_404(db, Notification, notification_id, NOTIFICATION_NOT_FOUND)
        db.delete(notification)
        db.commit()
