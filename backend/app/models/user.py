from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow

ROLE_VOLUNTEER = "volunteer"
ROLE_EVENT_MANAGER = "event_manager"


class User(SQLModel, table=True):
    """Platform user, either a volunteer or an event manager."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    email: str = Field(index=True, unique=True, max_length=255)
    name: str = Field(max_length=255)
    role: str = Field(default=ROLE_VOLUNTEER, max_length=50)
    is_active: bool = Field(default=True)
    bio: str | None = Field(default=None, max_length=2000)
    # Derived from reviews, recomputed by the rating aggregator
    average_rating: float = Field(default=0.0, nullable=False)
    total_ratings: int = Field(default=0, nullable=False)
    # Optimistic locking version counter
    version: int = Field(default=1, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
