"""Per-event chat groups: created lazily, membership only grows."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlmodel import Session, delete, select

from app.models import ChatGroup, ChatGroupMember, ChatMessage
from app.services.errors import Forbidden, ValidationFailed

logger = logging.getLogger(__name__)


def get_group(session: Session, event_id: UUID) -> ChatGroup | None:
    return session.exec(
        select(ChatGroup).where(ChatGroup.event_id == event_id)
    ).one_or_none()


def group_member_ids(session: Session, group_id: UUID) -> list[UUID]:
    return session.exec(
        select(ChatGroupMember.user_id)
        .where(ChatGroupMember.group_id == group_id)
        .order_by(ChatGroupMember.added_at)
    ).all()


def group_messages(session: Session, group_id: UUID) -> list[ChatMessage]:
    return session.exec(
        select(ChatMessage)
        .where(ChatMessage.group_id == group_id)
        .order_by(ChatMessage.created_at, ChatMessage.id)
    ).all()


def ensure_group(
    session: Session,
    event_id: UUID,
    members: Iterable[UUID],
    welcome_text: str,
    sender_id: UUID,
) -> ChatGroup:
    """
    Return the event's chat group, creating it if needed.

    A new group gets the given members and a single welcome message from
    ``sender_id``. An existing group only gains the members it is missing;
    its messages are left as they are.
    """
    group = get_group(session, event_id)
    if group is None:
        group = ChatGroup(event_id=event_id)
        session.add(group)
        session.flush()
        session.add(ChatMessage(group_id=group.id, sender_id=sender_id, text=welcome_text))
        logger.info(f"Created chat group {group.id} for event {event_id}")

    existing = set(group_member_ids(session, group.id))
    added = []
    for user_id in dict.fromkeys(members):
        if user_id not in existing:
            session.add(ChatGroupMember(group_id=group.id, user_id=user_id))
            existing.add(user_id)
            added.append(user_id)

    if added:
        session.flush()
        logger.info(f"Chat group {group.id}: added members {added}")
    return group


def post_message(
    session: Session, group: ChatGroup, sender_id: UUID, text: str
) -> ChatMessage:
    if sender_id not in group_member_ids(session, group.id):
        raise Forbidden("Only chat members can post messages")
    text = text.strip()
    if not text:
        raise ValidationFailed("Message cannot be empty")

    message = ChatMessage(group_id=group.id, sender_id=sender_id, text=text)
    session.add(message)
    session.flush()
    return message


def delete_group(session: Session, event_id: UUID) -> None:
    group = get_group(session, event_id)
    if group is None:
        return
    session.exec(delete(ChatMessage).where(ChatMessage.group_id == group.id))
    session.exec(delete(ChatGroupMember).where(ChatGroupMember.group_id == group.id))
    session.delete(group)
    logger.info(f"Deleted chat group {group.id} for event {event_id}")
