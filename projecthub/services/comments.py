from __future__ import annotations

import builtins
import uuid

from sqlalchemy.orm import Session

from projecthub.errors import AuthorizationError
from projecthub.logging import get_logger
from projecthub.models.comment import Comment
from projecthub.models.task import Task
from projecthub.models.team import TeamMember
from projecthub.models.user import User
from projecthub.schemas.projects import CommentCreate, CommentUpdate
from projecthub.services.common import apply_pagination, apply_search, get_or_404
from projecthub.services.fanout import NotifyingService
from projecthub.services.notification_events import CommentCreated, CommentDeleted

logger = get_logger(__name__)

COMMENT_NOT_FOUND = "Comment not found"


def _can_comment(db: Session, task: Task, user_id: uuid.UUID) -> bool:
    if task.assign_to == user_id:
        return True
    team_id = task.project.team_id if task.project else None
    if team_id is None:
        return False
    membership = (
        db.query(TeamMember.id)
        .filter(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        .first()
    )
    return membership is not None


class Comments(NotifyingService):
    def create(self, db: Session, payload: CommentCreate) -> Comment:
        """The comment author is the actor of the resulting notice."""
        task = get_or_404(db, Task, payload.task_id, "Task not found")
        author = get_or_404(db, User, payload.user_id, "User not found")
        if not _can_comment(db, task, author.id):
            raise AuthorizationError("Access denied to this task")
        comment = Comment(task_id=task.id, user_id=author.id, content=payload.content)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        logger.info("comment_created comment_id=%s task_id=%s", comment.id, task.id)
        self.notify(db, CommentCreated(actor_id=author.id, task_id=task.id))
        return comment

    @staticmethod
    def get(db: Session, comment_id: str) -> Comment:
        return get_or_404(db, Comment, comment_id, COMMENT_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        task_id: uuid.UUID | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[Comment], int]:
        query = apply_search(db.query(Comment), search, (Comment.content,))
        if task_id:
            query = query.filter(Comment.task_id == task_id)
        total = query.count()
        items = apply_pagination(query.order_by(Comment.created_at.desc()), limit, offset).all()
        return items, total

    @staticmethod
    def update(db: Session, comment_id: str, payload: CommentUpdate) -> Comment:
        comment = get_or_404(db, Comment, comment_id, COMMENT_NOT_FOUND)
        data = payload.model_dump(exclude_unset=True)
        if "task_id" in data:
            get_or_404(db, Task, data["task_id"], "Task not found")
        if "user_id" in data:
            get_or_404(db, User, data["user_id"], "User not found")
        for field, value in data.items():
            setattr(comment, field, value)
        db.commit()
        db.refresh(comment)
        return comment

    def delete(self, db: Session, comment_id: str, actor_id: uuid.UUID | None = None) -> None:
        comment = get_or_404(db, Comment, comment_id, COMMENT_NOT_FOUND)
        task_id = comment.task_id
        db.delete(comment)
        db.commit()
        logger.info("comment_deleted comment_id=%s task_id=%s", comment_id, task_id)
        self.notify(db, CommentDeleted(actor_id=actor_id, task_id=task_id))
