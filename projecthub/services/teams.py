from __future__ import annotations

import builtins
import uuid

from sqlalchemy.orm import Session

from projecthub.errors import ConflictError
from projecthub.logging import get_logger
from projecthub.models.team import Team
from projecthub.schemas.teams import TeamCreate, TeamUpdate
from projecthub.services.common import apply_pagination, apply_search, commit_or_conflict, get_or_404
from projecthub.services.fanout import NotifyingService
from projecthub.services.notification_events import TeamCreated

logger = get_logger(__name__)

TEAM_NOT_FOUND = "Team not found"
TEAM_NAME_TAKEN = "Team name already taken."
TEAM_NAME_CLASH = "Another team with this name already exists."


class Teams(NotifyingService):
    def create(self, db: Session, payload: TeamCreate, actor_id: uuid.UUID) -> Team:
        if db.query(Team.id).filter(Team.name == payload.name).first():
            raise ConflictError(TEAM_NAME_TAKEN)
        team = Team(name=payload.name, description=payload.description, created_by=actor_id)
        db.add(team)
        commit_or_conflict(db, TEAM_NAME_TAKEN)
        db.refresh(team)
        logger.info("team_created team_id=%s created_by=%s", team.id, actor_id)
        self.notify(db, TeamCreated(actor_id=actor_id, team_id=team.id))
        return team

    @staticmethod
    def get(db: Session, team_id: str) -> Team:
        return get_or_404(db, Team, team_id, TEAM_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[Team], int]:
        query = apply_search(db.query(Team), search, (Team.name, Team.description))
        total = query.count()
        items = apply_pagination(query.order_by(Team.created_at.desc()), limit, offset).all()
        return items, total

    @staticmethod
    def update(db: Session, team_id: str, payload: TeamUpdate) -> Team:
        team = get_or_404(db, Team, team_id, TEAM_NOT_FOUND)
        data = payload.model_dump(exclude_unset=True)
        new_name = data.get("name")
        if new_name and new_name != team.name:
            if db.query(Team.id).filter(Team.name == new_name, Team.id != team.id).first():
                raise ConflictError(TEAM_NAME_CLASH)
        for field, value in data.items():
            setattr(team, field, value)
        commit_or_conflict(db, TEAM_NAME_CLASH)
        db.refresh(team)
        return team

    @staticmethod
    def delete(db: Session, team_id: str) -> None:
        """Delete a team together with its memberships, projects and their tasks."""
        team = get_or_404(db, Team, team_id, TEAM_NOT_FOUND)
        db.delete(team)
        db.commit()
        logger.info("team_deleted team_id=%s", team.id)
