from __future__ import annotations

import builtins
import uuid

from sqlalchemy.orm import Session

from projecthub.errors import ConflictError
from projecthub.logging import get_logger
from projecthub.models.project import Project
from projecthub.models.task import Task, TaskPriority, TaskStatus
from projecthub.models.user import User
from projecthub.schemas.projects import TaskCreate, TaskUpdate
from projecthub.services.common import apply_pagination, apply_search, commit_or_conflict, get_or_404
from projecthub.services.fanout import NotifyingService
from projecthub.services.notification_events import TaskAssigned, TaskDeleted, TaskStatusChanged

logger = get_logger(__name__)

TASK_NOT_FOUND = "Task not found"
TASK_TITLE_TAKEN = "Task with the same title already exists in the project."


def _title_taken(db: Session, project_id: uuid.UUID, title: str, exclude_id: uuid.UUID | None = None) -> bool:
    query = db.query(Task.id).filter(Task.project_id == project_id, Task.title == title)
    if exclude_id is not None:
        query = query.filter(Task.id != exclude_id)
    return query.first() is not None


class Tasks(NotifyingService):
    def create(self, db: Session, payload: TaskCreate, actor_id: uuid.UUID | None = None) -> Task:
        project = get_or_404(db, Project, payload.project_id, "Project not found")
        assignee = get_or_404(db, User, payload.assign_to, "User not found")
        if _title_taken(db, project.id, payload.title):
            raise ConflictError(TASK_TITLE_TAKEN)
        task = Task(**payload.model_dump())
        db.add(task)
        commit_or_conflict(db, TASK_TITLE_TAKEN)
        db.refresh(task)
        logger.info("task_created task_id=%s project_id=%s", task.id, project.id)
        self.notify(db, TaskAssigned(actor_id=actor_id, task_id=task.id, assignee_id=assignee.id))
        return task

    @staticmethod
    def get(db: Session, task_id: str) -> Task:
        return get_or_404(db, Task, task_id, TASK_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        project_id: uuid.UUID | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[Task], int]:
        query = apply_search(db.query(Task), search, (Task.title, Task.description))
        try:
            if status:
                query = query.filter(Task.status == TaskStatus(status))
            if priority:
                query = query.filter(Task.priority == TaskPriority(priority))
        except ValueError:
            return [], 0
        if project_id:
            query = query.filter(Task.project_id == project_id)
        total = query.count()
        items = apply_pagination(query.order_by(Task.created_at.desc()), limit, offset).all()
        return items, total

    def update(self, db: Session, task_id: str, payload: TaskUpdate, actor_id: uuid.UUID | None = None) -> Task:
        task = get_or_404(db, Task, task_id, TASK_NOT_FOUND)
        data = payload.model_dump(exclude_unset=True)
        project_id = data.get("project_id") or task.project_id
        if project_id != task.project_id:
            get_or_404(db, Project, project_id, "Project not found")
        if data.get("assign_to") and data["assign_to"] != task.assign_to:
            get_or_404(db, User, data["assign_to"], "User not found")
        title = data.get("title") or task.title
        if (project_id, title) != (task.project_id, task.title) and _title_taken(db, project_id, title, task.id):
            raise ConflictError(TASK_TITLE_TAKEN)

        previous_assignee, previous_status = task.assign_to, task.status
        for field, value in data.items():
            setattr(task, field, value)
        commit_or_conflict(db, TASK_TITLE_TAKEN)
        db.refresh(task)

        if task.assign_to != previous_assignee:
            self.notify(db, TaskAssigned(actor_id=actor_id, task_id=task.id, assignee_id=task.assign_to))
        if task.status != previous_status:
            self.notify(db, TaskStatusChanged(actor_id=actor_id, task_id=task.id, new_status=task.status.value))
        return task

    def delete(self, db: Session, task_id: str, actor_id: uuid.UUID | None = None) -> None:
        task = get_or_404(db, Task, task_id, TASK_NOT_FOUND)
        self.notify(db, TaskDeleted(actor_id=actor_id, task_id=task.id))
        db.delete(task)
        db.commit()
        logger.info("task_deleted task_id=%s", task.id)
