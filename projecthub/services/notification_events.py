"""Domain events that produce notifications.

Each event carries exactly what its recipient resolution needs. Events
that describe a deletion must be dispatched while the row still exists.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationEvent:
    actor_id: uuid.UUID | None


@dataclass(frozen=True)
class ProjectCreated(NotificationEvent):
    project_id: uuid.UUID


@dataclass(frozen=True)
class ProjectStatusChanged(NotificationEvent):
    project_id: uuid.UUID
    new_status: str


@dataclass(frozen=True)
class ProjectDeleted(NotificationEvent):
    project_id: uuid.UUID


@dataclass(frozen=True)
class TeamCreated(NotificationEvent):
    team_id: uuid.UUID


@dataclass(frozen=True)
class TeamJoined(NotificationEvent):
    team_id: uuid.UUID
    user_id: uuid.UUID


@dataclass(frozen=True)
class MemberRemoved(NotificationEvent):
    team_id: uuid.UUID
    user_id: uuid.UUID


@dataclass(frozen=True)
class MemberRoleChanged(NotificationEvent):
    team_id: uuid.UUID
    user_id: uuid.UUID
    new_role: str


@dataclass(frozen=True)
class TaskAssigned(NotificationEvent):
    task_id: uuid.UUID
    assignee_id: uuid.UUID


@dataclass(frozen=True)
class TaskStatusChanged(NotificationEvent):
    task_id: uuid.UUID
    new_status: str


@dataclass(frozen=True)
class TaskDeleted(NotificationEvent):
    task_id: uuid.UUID


@dataclass(frozen=True)
class CommentCreated(NotificationEvent):
    task_id: uuid.UUID


@dataclass(frozen=True)
class CommentDeleted(NotificationEvent):
    task_id: uuid.UUID
