"""
Per-role dashboard counters and volunteer participation stats.

An event counts for a volunteer once they have applied to it, whatever the
application's status. Events dated at or before ``now`` count as completed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from app.models import (
    ROLE_EVENT_MANAGER,
    ROLE_VOLUNTEER,
    STATUS_PENDING,
    Application,
    Event,
    User,
)
from app.models.types import utcnow
from app.services.errors import ValidationFailed

logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    events_count: int
    upcoming_events: list[Event] | None = None
    pending_applications: int | None = None


@dataclass
class Participation:
    total: int = 0
    completed: int = 0
    ongoing: int = 0
    events: list[Event] = field(default_factory=list)


def _applied_events(session: Session, user_id: UUID) -> list[Event]:
    return session.exec(
        select(Event)
        .join(Application, Application.event_id == Event.id)
        .where(Application.user_id == user_id)
        .order_by(Event.date.desc())
    ).all()


def participation_for(
    session: Session, user_id: UUID, now: datetime | None = None
) -> Participation:
    now = now or utcnow()
    events = _applied_events(session, user_id)
    completed = sum(1 for event in events if event.date <= now)
    return Participation(
        total=len(events),
        completed=completed,
        ongoing=len(events) - completed,
        events=events,
    )


def dashboard_for(session: Session, user: User, now: datetime | None = None) -> Dashboard:
    now = now or utcnow()

    if user.role == ROLE_VOLUNTEER:
        events = _applied_events(session, user.id)
        upcoming = sorted((e for e in events if e.date > now), key=lambda e: e.date)
        return Dashboard(events_count=len(events), upcoming_events=upcoming)

    if user.role == ROLE_EVENT_MANAGER:
        events_count = session.exec(
            select(func.count()).select_from(Event).where(Event.created_by == user.id)
        ).one()
        pending = session.exec(
            select(func.count())
            .select_from(Application)
            .join(Event, Event.id == Application.event_id)
            .where(Event.created_by == user.id, Application.status == STATUS_PENDING)
        ).one()
        return Dashboard(events_count=events_count, pending_applications=pending)

    logger.warning(f"Dashboard requested for user {user.id} with role {user.role!r}")
    raise ValidationFailed("Invalid user role")
