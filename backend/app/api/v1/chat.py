from __future__ import annotations

import logging

from fastapi import APIRouter, status

from app.api.deps import CurrentUser, PublisherDep
from app.db import SessionDep
from app.schemas import ChatGroupRead, ChatMessageCreate, ChatMessageRead
from app.services.chat_groups import get_group, group_member_ids, group_messages, post_message
from app.services.concurrency import unit_of_work
from app.services.errors import Forbidden, NotFound, parse_uuid
from app.services.realtime import user_channel

logger = logging.getLogger(__name__)

router = APIRouter()


def _member_group(session: SessionDep, event_id: str, user_id):
    group = get_group(session, parse_uuid(event_id, "event"))
    if group is None:
        raise NotFound("Chat group not found")
    members = group_member_ids(session, group.id)
    if user_id not in members:
        raise Forbidden("You are not a member of this chat")
    return group, members


@router.get("/{event_id}/chat", response_model=ChatGroupRead, summary="Get event chat")
def read_chat(
    event_id: str,
    session: SessionDep,
    current_user: CurrentUser,
) -> ChatGroupRead:
    group, members = _member_group(session, event_id, current_user.id)
    return ChatGroupRead(
        id=group.id,
        event_id=group.event_id,
        members=members,
        messages=[ChatMessageRead.model_validate(m) for m in group_messages(session, group.id)],
    )


@router.post(
    "/{event_id}/chat/messages",
    response_model=ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post chat message",
)
def send_chat_message(
    event_id: str,
    payload: ChatMessageCreate,
    session: SessionDep,
    current_user: CurrentUser,
    publisher: PublisherDep,
) -> ChatMessageRead:
    group, members = _member_group(session, event_id, current_user.id)
    with unit_of_work(session):
        message = post_message(session, group, current_user.id, payload.text)
    session.refresh(message)

    result = ChatMessageRead.model_validate(message)
    body = {"event_id": str(group.event_id), **result.model_dump(mode="json")}
    for member_id in members:
        if member_id == current_user.id:
            continue
        try:
            publisher.publish(user_channel(member_id), "receiveMessage", body)
        except Exception:
            logger.warning(f"Chat push to {member_id} failed", exc_info=True)
    return result
