from __future__ import annotations

import builtins
import uuid

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from projecthub.errors import ConflictError
from projecthub.logging import get_logger
from projecthub.models.team import Team, TeamMember
from projecthub.models.user import User
from projecthub.schemas.teams import TeamMemberCreate, TeamMemberUpdate
from projecthub.services.common import apply_pagination, commit_or_conflict, escape_like, get_or_404
from projecthub.services.fanout import NotifyingService
from projecthub.services.notification_events import MemberRemoved, MemberRoleChanged, TeamJoined

logger = get_logger(__name__)

MEMBER_NOT_FOUND = "Member not found"
MEMBER_EXISTS = "Member already exists in the team."


class Members(NotifyingService):
    def create(self, db: Session, payload: TeamMemberCreate, actor_id: uuid.UUID | None = None) -> TeamMember:
        team = get_or_404(db, Team, payload.team_id, "Team not found")
        user = get_or_404(db, User, payload.user_id, "User not found")
        existing = (
            db.query(TeamMember.id)
            .filter(TeamMember.team_id == team.id, TeamMember.user_id == user.id)
            .first()
        )
        if existing:
            raise ConflictError(MEMBER_EXISTS)
        member = TeamMember(team_id=team.id, user_id=user.id, role=payload.role)
        db.add(member)
        commit_or_conflict(db, MEMBER_EXISTS)
        db.refresh(member)
        logger.info("member_added team_id=%s user_id=%s role=%s", team.id, user.id, member.role.value)
        self.notify(db, TeamJoined(actor_id=actor_id, team_id=team.id, user_id=user.id))
        return member

    @staticmethod
    def get(db: Session, member_id: str) -> TeamMember:
        return get_or_404(db, TeamMember, member_id, MEMBER_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        team_id: uuid.UUID | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[TeamMember], int]:
        query = db.query(TeamMember).join(User, TeamMember.user_id == User.id).join(Team, TeamMember.team_id == Team.id)
        if team_id:
            query = query.filter(TeamMember.team_id == team_id)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.filter(
                or_(
                    cast(TeamMember.role, String).ilike(pattern, escape="\\"),
                    User.name.ilike(pattern, escape="\\"),
                    Team.name.ilike(pattern, escape="\\"),
                )
            )
        total = query.count()
        items = apply_pagination(query.order_by(TeamMember.joined_at.desc()), limit, offset).all()
        return items, total

    def update(
        self,
        db: Session,
        member_id: str,
        payload: TeamMemberUpdate,
        actor_id: uuid.UUID | None = None,
    ) -> TeamMember:
        member = get_or_404(db, TeamMember, member_id, MEMBER_NOT_FOUND)
        previous = member.role
        member.role = payload.role
        db.commit()
        db.refresh(member)
        if member.role != previous:
            self.notify(
                db,
                MemberRoleChanged(
                    actor_id=actor_id,
                    team_id=member.team_id,
                    user_id=member.user_id,
                    new_role=member.role.value,
                ),
            )
        return member

    def delete(self, db: Session, member_id: str, actor_id: uuid.UUID | None = None) -> None:
        member = get_or_404(db, TeamMember, member_id, MEMBER_NOT_FOUND)
        self.notify(db, MemberRemoved(actor_id=actor_id, team_id=member.team_id, user_id=member.user_id))
        db.delete(member)
        db.commit()
        logger.info("member_removed team_id=%s user_id=%s", member.team_id, member.user_id)
