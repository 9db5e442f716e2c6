from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow


class ChatGroup(SQLModel, table=True):
    """Per-event group chat, one per event."""

    __tablename__ = "chat_groups"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    event_id: UUID = Field(
        foreign_key="events.id", nullable=False, unique=True, index=True
    )
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)


class ChatGroupMember(SQLModel, table=True):
    __tablename__ = "chat_group_members"

    group_id: UUID = Field(
        foreign_key="chat_groups.id", primary_key=True, nullable=False
    )
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, nullable=False)
    added_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)


class ChatMessage(SQLModel, table=True):
    """Append-only chat message."""

    __tablename__ = "chat_messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    group_id: UUID = Field(foreign_key="chat_groups.id", nullable=False, index=True)
    sender_id: UUID = Field(foreign_key="users.id", nullable=False)
    text: str = Field(max_length=4000)
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=UTCDateTime, nullable=False, index=True
    )
