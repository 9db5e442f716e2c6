from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"
APPLICATION_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_REJECTED)


class Application(SQLModel, table=True):
    """Volunteer application to an event."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_applications_event_user"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    event_id: UUID = Field(foreign_key="events.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    status: str = Field(default=STATUS_PENDING, max_length=32)  # pending, accepted, rejected
    applied_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
    completed: bool = Field(default=False, nullable=False)
    rating: Optional[int] = Field(default=None, nullable=True)
