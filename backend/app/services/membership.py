from __future__ import annotations

import logging
from uuid import UUID

from sqlmodel import Session, select

from app.models import Application, ChatGroup, Event, EventTeamMember
from app.services.chat_groups import ensure_group

logger = logging.getLogger(__name__)


def team_member_ids(session: Session, event_id: UUID) -> list[UUID]:
    return session.exec(
        select(EventTeamMember.user_id)
        .where(EventTeamMember.event_id == event_id)
        .order_by(EventTeamMember.added_at)
    ).all()


def add_team_member(session: Session, event_id: UUID, user_id: UUID) -> bool:
    """Add a user to the event team. Returns False if already a member."""
    if session.get(EventTeamMember, (event_id, user_id)) is not None:
        return False
    session.add(EventTeamMember(event_id=event_id, user_id=user_id))
    session.flush()
    return True


def admit_accepted_applicant(
    session: Session, event: Event, application: Application
) -> ChatGroup:
    """
    Put an accepted applicant on the team and in the event chat.

    Both writes go into the caller's transaction; nothing is committed here.
    """
    if add_team_member(session, event.id, application.user_id):
        logger.info(f"User {application.user_id} joined the team of event {event.id}")

    members = [event.created_by, *team_member_ids(session, event.id)]
    return ensure_group(
        session,
        event.id,
        members,
        welcome_text=f'Welcome to "{event.title}" chat!',
        sender_id=event.created_by,
    )
