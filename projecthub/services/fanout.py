"""Turn domain events into notification rows.

Recipient resolution walks the team/project/task relations of the event's
subject. Every failure is logged and absorbed: the request that raised the
event has already done its work and must not fail because of a notice.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from projecthub.logging import get_logger
from projecthub.models.notification import Notification
from projecthub.models.project import Project
from projecthub.models.task import Task
from projecthub.models.team import Team
from projecthub.models.user import User, UserRole
from projecthub.services.notification_events import (
    CommentCreated,
    CommentDeleted,
    MemberRemoved,
    MemberRoleChanged,
    NotificationEvent,
    ProjectCreated,
    ProjectDeleted,
    ProjectStatusChanged,
    TaskAssigned,
    TaskDeleted,
    TaskStatusChanged,
    TeamCreated,
    TeamJoined,
)
from projecthub.telemetry import get_tracer

logger = get_logger(__name__)

UNKNOWN_ACTOR = "Unknown user"


@dataclass
class Delivery:
    message: str
    recipients: list[uuid.UUID] = field(default_factory=list)


def _unique(ids: Iterable[uuid.UUID | None]) -> list[uuid.UUID]:
    seen: set[uuid.UUID] = set()
    ordered: list[uuid.UUID] = []
    for user_id in ids:
        if user_id is None or user_id in seen:
            continue
        seen.add(user_id)
        ordered.append(user_id)
    return ordered


def _team_member_ids(team: Team | None) -> list[uuid.UUID]:
    if team is None:
        return []
    return [member.user_id for member in team.members]


def _status_label(value) -> str:
    return getattr(value, "value", value)


class NotificationFanout:
    def __init__(self):
        self._resolvers: dict[type[NotificationEvent], Callable[[Session, NotificationEvent], Delivery | None]] = {
            ProjectCreated: self._project_created,
            ProjectStatusChanged: self._project_status_changed,
            ProjectDeleted: self._project_deleted,
            TeamCreated: self._team_created,
            TeamJoined: self._team_joined,
            MemberRemoved: self._member_removed,
            MemberRoleChanged: self._member_role_changed,
            TaskAssigned: self._task_assigned,
            TaskStatusChanged: self._task_status_changed,
            TaskDeleted: self._task_deleted,
            CommentCreated: self._comment_created,
            CommentDeleted: self._comment_deleted,
        }

    def handles(self, event_type: type[NotificationEvent]) -> bool:
        return event_type in self._resolvers

    def dispatch(self, db: Session, event: NotificationEvent) -> int:
        """Write one notification per resolved recipient; returns how many were stored."""
        resolver = self._resolvers.get(type(event))
        if resolver is None:
            raise TypeError(f"No notification resolver for {type(event).__name__}")
        event_name = type(event).__name__
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("notification.dispatch", attributes={"notification.event": event_name}) as span:
            try:
                delivery = resolver(db, event)
            except Exception:
                db.rollback()
                logger.exception("notification_resolve_failed event=%s", event_name)
                return 0
            if delivery is None:
                logger.info("notification_subject_missing event=%s", event_name)
                return 0

            delivered = 0
            for user_id in _unique(delivery.recipients):
                try:
                    db.add(Notification(user_id=user_id, message=delivery.message, is_read=False))
                    db.commit()
                    delivered += 1
                except Exception:
                    db.rollback()
                    logger.exception("notification_insert_failed event=%s user_id=%s", event_name, user_id)
            span.set_attribute("notification.delivered", delivered)
            logger.debug("notifications_sent event=%s count=%s", event_name, delivered)
            return delivered

    @staticmethod
    def _actor_name(db: Session, actor_id: uuid.UUID | None) -> str:
        actor = db.get(User, actor_id) if actor_id else None
        return actor.name if actor else UNKNOWN_ACTOR

    def _project_created(self, db: Session, event: ProjectCreated) -> Delivery | None:
        project = db.get(Project, event.project_id)
        if project is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        recipients = [uid for uid in _team_member_ids(project.team) if uid != event.actor_id]
        return Delivery(f'New project "{project.name}" has been created by {actor}', recipients)

    def _project_status_changed(self, db: Session, event: ProjectStatusChanged) -> Delivery | None:
        project = db.get(Project, event.project_id)
        if project is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        return Delivery(
            f'Project "{project.name}" status changed to {_status_label(event.new_status)} by {actor}',
            _team_member_ids(project.team),
        )

    def _project_deleted(self, db: Session, event: ProjectDeleted) -> Delivery | None:
        project = db.get(Project, event.project_id)
        if project is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        return Delivery(f'Project "{project.name}" has been deleted by {actor}', _team_member_ids(project.team))

    def _team_created(self, db: Session, event: TeamCreated) -> Delivery | None:
        team = db.get(Team, event.team_id)
        if team is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        admins = db.query(User.id).filter(User.role == UserRole.admin).order_by(User.created_at).all()
        recipients = [row.id for row in admins if row.id != event.actor_id]
        return Delivery(f'New team "{team.name}" has been created by {actor}', recipients)

    def _team_joined(self, db: Session, event: TeamJoined) -> Delivery | None:
        team = db.get(Team, event.team_id)
        if team is None:
            return None
        return Delivery(
            f'Welcome to team "{team.name}"! Check out your assigned tasks and projects.',
            [event.user_id],
        )

    def _member_removed(self, db: Session, event: MemberRemoved) -> Delivery | None:
        team = db.get(Team, event.team_id)
        if team is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        return Delivery(f'You have been removed from team "{team.name}" by {actor}', [event.user_id])

    def _member_role_changed(self, db: Session, event: MemberRoleChanged) -> Delivery | None:
        team = db.get(Team, event.team_id)
        if team is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        return Delivery(
            f'Your role in team "{team.name}" has been changed to {_status_label(event.new_role)} by {actor}',
            [event.user_id],
        )

    def _task_assigned(self, db: Session, event: TaskAssigned) -> Delivery | None:
        task = db.get(Task, event.task_id)
        if task is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        return Delivery(f'You have been assigned a new task: "{task.title}" by {actor}', [event.assignee_id])

    def _task_status_changed(self, db: Session, event: TaskStatusChanged) -> Delivery | None:
        task = db.get(Task, event.task_id)
        if task is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        team = task.project.team if task.project else None
        return Delivery(
            f'Task "{task.title}" status changed to {_status_label(event.new_status)} by {actor}',
            [task.assign_to, *_team_member_ids(team)],
        )

    def _task_deleted(self, db: Session, event: TaskDeleted) -> Delivery | None:
        task = db.get(Task, event.task_id)
        if task is None:
            return None
        actor = self._actor_name(db, event.actor_id)
        return Delivery(f'Task "{task.title}" has been deleted by {actor}', [task.assign_to])

    def _comment_created(self, db: Session, event: CommentCreated) -> Delivery | None:
        task = db.get(Task, event.task_id)
        if task is None:
            return None
        if task.assign_to == event.actor_id:
            return Delivery(f'New comment on task: "{task.title}"')
        actor = self._actor_name(db, event.actor_id)
        return Delivery(f'{actor} commented on task: "{task.title}"', [task.assign_to])

    def _comment_deleted(self, db: Session, event: CommentDeleted) -> Delivery | None:
        task = db.get(Task, event.task_id)
        if task is None:
            return None
        if task.assign_to == event.actor_id:
            return Delivery(f'A comment on task "{task.title}" has been deleted')
        actor = self._actor_name(db, event.actor_id)
        return Delivery(f'A comment on task "{task.title}" has been deleted by {actor}', [task.assign_to])


class NotifyingService:
    """Base for services that raise notification events after a write."""

    def __init__(self, notifier: NotificationFanout | None = None):
        self.notifier = notifier

    def notify(self, db: Session, event: NotificationEvent) -> int:
        if self.notifier is None:
            return 0
        return self.notifier.dispatch(db, event)
