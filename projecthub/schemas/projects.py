from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from projecthub.models.project import ProjectStatus
from projecthub.models.task import TaskPriority, TaskStatus
from projecthub.schemas.common import IsoDateTime, ProjectBrief, TaskBrief, TeamBrief, UserBrief


class ProjectCreate(BaseModel):
    team_id: UUID
    name: str
    description: str | None = None
    status: ProjectStatus = ProjectStatus.planning
    deadline: IsoDateTime


class ProjectUpdate(BaseModel):
    team_id: UUID | None = None
    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    deadline: IsoDateTime | None = None


class ProjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    team_id: UUID
    name: str
    description: str | None = None
    status: ProjectStatus
    deadline: datetime | None = None
    created_at: datetime
    updated_at: datetime
    team: TeamBrief | None = None


class TaskCreate(BaseModel):
    project_id: UUID
    assign_to: UUID
    title: str
    description: str | None = None
    priority: TaskPriority
    status: TaskStatus
    due_date: IsoDateTime


class TaskUpdate(BaseModel):
    project_id: UUID | None = None
    assign_to: UUID | None = None
    title: str | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: IsoDateTime | None = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    project_id: UUID
    assign_to: UUID
    title: str
    description: str | None = None
    priority: TaskPriority
    status: TaskStatus
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    project: ProjectBrief | None = None
    assigned_user: UserBrief | None = Field(default=None, serialization_alias="assignedUser")


class CommentCreate(BaseModel):
    task_id: UUID
    user_id: UUID
    content: str


class CommentUpdate(BaseModel):
    task_id: UUID | None = None
    user_id: UUID | None = None
    content: str | None = None


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    task_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    user: UserBrief | None = None
    task: TaskBrief | None = None
