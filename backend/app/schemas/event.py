from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.application import ApplicationRead, id_field


def _to_aware_utc(value: datetime | None) -> datetime | None:
    # Offset-less input is read as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=5000)
    date: datetime
    location: str = Field(min_length=1, max_length=255)
    requirements: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return _to_aware_utc(value)


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    date: Optional[datetime] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    requirements: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime | None) -> datetime | None:
        return _to_aware_utc(value)


class EventRead(EventBase):
    id: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    has_applied: bool = False

    model_config = ConfigDict(from_attributes=True)


class EventDetail(EventRead):
    applicants: List[ApplicationRead] = []
    team_member_ids: List[UUID] = []


class EventMutationResponse(BaseModel):
    message: str
    event: EventRead


class EventSummary(BaseModel):
    id: UUID = id_field()
    title: str

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
