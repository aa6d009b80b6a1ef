from __future__ import annotations

import builtins
import uuid

from sqlalchemy.orm import Session

from projecthub.errors import ConflictError
from projecthub.logging import get_logger
from projecthub.models.project import Project, ProjectStatus
from projecthub.models.team import Team
from projecthub.schemas.projects import ProjectCreate, ProjectUpdate
from projecthub.services.common import apply_pagination, apply_search, commit_or_conflict, get_or_404
from projecthub.services.fanout import NotifyingService
from projecthub.services.notification_events import ProjectCreated, ProjectDeleted, ProjectStatusChanged

logger = get_logger(__name__)

PROJECT_NOT_FOUND = "Project not found"
PROJECT_NAME_TAKEN = "Project with the same name already exists in the team."


def _name_taken(db: Session, team_id: uuid.UUID, name: str, exclude_id: uuid.UUID | None = None) -> bool:
    query = db.query(Project.id).filter(Project.team_id == team_id, Project.name == name)
    if exclude_id is not None:
        query = query.filter(Project.id != exclude_id)
    return query.first() is not None


class Projects(NotifyingService):
    def create(self, db: Session, payload: ProjectCreate, actor_id: uuid.UUID | None = None) -> Project:
        team = get_or_404(db, Team, payload.team_id, "Team not found")
        if _name_taken(db, team.id, payload.name):
            raise ConflictError(PROJECT_NAME_TAKEN)
        project = Project(**payload.model_dump())
        db.add(project)
        commit_or_conflict(db, PROJECT_NAME_TAKEN)
        db.refresh(project)
        logger.info("project_created project_id=%s team_id=%s", project.id, team.id)
        self.notify(db, ProjectCreated(actor_id=actor_id, project_id=project.id))
        return project

    @staticmethod
    def get(db: Session, project_id: str) -> Project:
        return get_or_404(db, Project, project_id, PROJECT_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        status: str | None = None,
        team_id: uuid.UUID | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[Project], int]:
        query = apply_search(db.query(Project), search, (Project.name, Project.description))
        if status:
            try:
                query = query.filter(Project.status == ProjectStatus(status))
            except ValueError:
                return [], 0
        if team_id:
            query = query.filter(Project.team_id == team_id)
        total = query.count()
        items = apply_pagination(query.order_by(Project.created_at.desc()), limit, offset).all()
        return items, total

    def update(
        self,
        db: Session,
        project_id: str,
        payload: ProjectUpdate,
        actor_id: uuid.UUID | None = None,
    ) -> Project:
        project = get_or_404(db, Project, project_id, PROJECT_NOT_FOUND)
        data = payload.model_dump(exclude_unset=True)
        team_id = data.get("team_id") or project.team_id
        if team_id != project.team_id:
            get_or_404(db, Team, team_id, "Team not found")
        name = data.get("name") or project.name
        if (team_id, name) != (project.team_id, project.name) and _name_taken(db, team_id, name, project.id):
            raise ConflictError(PROJECT_NAME_TAKEN)
        previous_status = project.status
        for field, value in data.items():
            setattr(project, field, value)
        commit_or_conflict(db, PROJECT_NAME_TAKEN)
        db.refresh(project)
        if project.status != previous_status:
            self.notify(
                db,
                ProjectStatusChanged(actor_id=actor_id, project_id=project.id, new_status=project.status.value),
            )
        return project

    def delete(self, db: Session, project_id: str, actor_id: uuid.UUID | None = None) -> None:
        project = get_or_404(db, Project, project_id, PROJECT_NOT_FOUND)
        # Recipients are resolved through the project's team, so notify first.
        self.notify(db, ProjectDeleted(actor_id=actor_id, project_id=project.id))
        db.delete(project)
        db.commit()
        logger.info("project_deleted project_id=%s", project.id)
