from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageCreate(BaseModel):
    text: str = Field(min_length=1, max_length=4000)


class ChatMessageRead(BaseModel):
    id: UUID
    sender_id: UUID
    text: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatGroupRead(BaseModel):
    id: UUID
    event_id: UUID
    members: List[UUID]
    messages: List[ChatMessageRead]
