from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.schemas.application import id_field


class UpcomingEventRead(BaseModel):
    id: UUID = id_field()
    title: str
    date: datetime
    location: str

    model_config = ConfigDict(from_attributes=True)


class DashboardRead(BaseModel):
    """Volunteers get ``upcoming_events``, managers ``pending_applications``."""

    events_count: int
    upcoming_events: Optional[List[UpcomingEventRead]] = None
    pending_applications: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
