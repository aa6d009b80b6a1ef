from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from projecthub.models.user import UserRole


class UserCreate(BaseModel):
    name: str
    email: str
    password: str
    role: UserRole = UserRole.member
    avatar_url: str | None = None


class UserUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: UserRole | None = None
    avatar_url: str | None = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    email: str
    role: UserRole
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime
