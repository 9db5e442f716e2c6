from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow


class Review(SQLModel, table=True):
    """Rating left by an event manager for a volunteer on one event."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint(
            "volunteer_id",
            "event_manager_id",
            "event_id",
            name="uq_reviews_volunteer_manager_event",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    volunteer_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    event_manager_id: UUID = Field(foreign_key="users.id", nullable=False)
    # Reviews outlive the event they were left for
    event_id: UUID = Field(nullable=False, index=True)
    rating: int = Field(nullable=False)
    date: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
