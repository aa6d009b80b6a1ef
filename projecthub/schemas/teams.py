from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from projecthub.models.team import TeamMemberRole
from projecthub.schemas.common import TeamBrief, UserBrief


class TeamCreate(BaseModel):
    name: str
    description: str | None = None


class TeamUpdate(BaseModel):
    name: str | None = None
    description: str | None = None


class TeamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime
    created_by_user: UserBrief | None = Field(default=None, serialization_alias="createdBy")


class TeamMemberCreate(BaseModel):
    team_id: UUID
    user_id: UUID
    role: TeamMemberRole = TeamMemberRole.member


class TeamMemberUpdate(BaseModel):
    role: TeamMemberRole


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    team_id: UUID
    user_id: UUID
    role: TeamMemberRole
    joined_at: datetime
    team: TeamBrief | None = None
    user: UserBrief | None = None
