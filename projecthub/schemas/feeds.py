from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from projecthub.models.activity import ActivityEntityType
from projecthub.schemas.common import UserBrief


class NotificationCreate(BaseModel):
    user_id: UUID
    message: str
    is_read: bool = False


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    message: str
    is_read: bool
    created_at: datetime
    user: UserBrief | None = None


class ActivityLogCreate(BaseModel):
    user_id: UUID
    action: str
    entity_type: ActivityEntityType
    entity_id: UUID


class ActivityLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    action: str
    entity_type: ActivityEntityType
    entity_id: UUID
    created_at: datetime
    user: UserBrief | None = None
