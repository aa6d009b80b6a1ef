from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict

from projecthub.validators.rules import parse_iso_datetime


def _coerce_datetime(value: Any) -> Any:
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


IsoDateTime = Annotated[datetime, BeforeValidator(_coerce_datetime)]


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    email: str


class TeamBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    description: str | None = None


class ProjectBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str


class TaskBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    title: str
