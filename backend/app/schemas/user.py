from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.schemas.application import id_field


class UserRead(BaseModel):
    id: UUID
    email: str
    name: str
    role: str
    bio: Optional[str] = None
    is_active: bool
    average_rating: float
    total_ratings: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewRead(BaseModel):
    event_manager_id: UUID
    event_id: UUID
    rating: int
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class RatingSummary(BaseModel):
    user_id: UUID
    average_rating: float
    total_ratings: int
    reviews: List[ReviewRead]


class ParticipationStats(BaseModel):
    total: int
    completed: int
    ongoing: int

    model_config = ConfigDict(from_attributes=True)


class VolunteerProfile(BaseModel):
    id: UUID = id_field()
    name: str
    email: str
    bio: Optional[str] = None
    role: str
    events_participated: ParticipationStats
    ratings: RatingSummary
