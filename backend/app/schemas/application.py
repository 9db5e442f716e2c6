from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def id_field():
    """Identifier rendered as ``_id``, accepted as either ``id`` or ``_id``."""
    return Field(validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")


class ApplicationRead(BaseModel):
    id: UUID = id_field()
    user_id: UUID
    status: str
    applied_at: datetime
    completed: bool
    rating: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicantRead(ApplicationRead):
    user_name: str
    user_email: str
    user_bio: Optional[str] = None


class ApplicantListResponse(BaseModel):
    applicants: List[ApplicantRead]


class EventApplicantsRead(BaseModel):
    id: UUID = id_field()
    title: str
    applicants: List[ApplicationRead]


class ApplyResponse(BaseModel):
    message: str
    event: EventApplicantsRead


class MyApplicationRead(BaseModel):
    id: UUID = id_field()
    event_id: UUID
    event_title: str
    date: datetime
    event_manager: str
    applied_at: datetime
    status: str


class ApplicationStatusUpdate(BaseModel):
    # Validated against the known statuses by the lifecycle service
    status: str


class StatusUpdateResponse(BaseModel):
    message: str
    status: str


class CompleteVolunteerRequest(BaseModel):
    completed: bool = True
    rating: Optional[int] = None


class CompletedVolunteerRead(BaseModel):
    id: UUID = id_field()
    completed: bool
    rating: Optional[int] = None


class CompleteVolunteerResponse(BaseModel):
    message: str
    volunteer: CompletedVolunteerRead


class VolunteerRead(BaseModel):
    id: UUID = id_field()
    name: str
    email: str
    completed: bool
    rating: Optional[int] = None


class VolunteerListResponse(BaseModel):
    volunteers: List[VolunteerRead]
