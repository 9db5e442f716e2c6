from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow


class Event(SQLModel, table=True):
    """Volunteer event posted by an event manager."""

    __tablename__ = "events"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=255)
    description: str = Field(max_length=5000)
    date: datetime = Field(sa_type=UTCDateTime, nullable=False, index=True)
    location: str = Field(max_length=255)
    requirements: Optional[str] = Field(default=None, max_length=2000)
    created_by: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
    # Optimistic locking version counter, bumped on every lifecycle write
    version: int = Field(default=1, nullable=False)

    def touch(self) -> None:
        self.updated_at = utcnow()


class EventTeamMember(SQLModel, table=True):
    """Team membership: the creator plus every accepted volunteer."""

    __tablename__ = "event_team_members"

    event_id: UUID = Field(
        foreign_key="events.id", primary_key=True, nullable=False
    )
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, nullable=False)
    added_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
