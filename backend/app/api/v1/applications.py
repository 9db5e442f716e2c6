from __future__ import annotations

from typing import List

from fastapi import APIRouter

from app.api.deps import CurrentUser, LifecycleDep
from app.schemas import (
    ApplicantListResponse,
    ApplicantRead,
    ApplicationRead,
    ApplicationStatusUpdate,
    ApplyResponse,
    CompletedVolunteerRead,
    CompleteVolunteerRequest,
    CompleteVolunteerResponse,
    EventApplicantsRead,
    MyApplicationRead,
    StatusUpdateResponse,
    VolunteerListResponse,
    VolunteerRead,
)

router = APIRouter()


@router.post("/{event_id}/apply", response_model=ApplyResponse, summary="Apply for event")
def apply_for_event(
    event_id: str,
    lifecycle: LifecycleDep,
    current_user: CurrentUser,
) -> ApplyResponse:
    event = lifecycle.apply(event_id, current_user)
    applications = lifecycle.applications_for(event.id)
    return ApplyResponse(
        message="Application submitted successfully",
        event=EventApplicantsRead(
            id=event.id,
            title=event.title,
            applicants=[ApplicationRead.model_validate(a) for a in applications],
        ),
    )


@router.get(
    "/my-applications",
    response_model=List[MyApplicationRead],
    summary="My applications",
)
def list_my_applications(
    lifecycle: LifecycleDep,
    current_user: CurrentUser,
) -> List[MyApplicationRead]:
    return [
        MyApplicationRead(
            id=application.id,
            event_id=event.id,
            event_title=event.title,
            date=event.date,
            event_manager=manager.name,
            applied_at=application.applied_at,
            status=application.status,
        )
        for application, event, manager in lifecycle.my_applications(current_user)
    ]


@router.get(
    "/{event_id}/applications",
    response_model=ApplicantListResponse,
    summary="List applications for event",
)
def list_event_applications(
    event_id: str,
    lifecycle: LifecycleDep,
    current_user: CurrentUser,
) -> ApplicantListResponse:
    rows = lifecycle.event_applications(event_id, current_user)
    return ApplicantListResponse(
        applicants=[
            ApplicantRead(
                id=application.id,
                user_id=user.id,
                status=application.status,
                applied_at=application.applied_at,
                completed=application.completed,
                rating=application.rating,
                user_name=user.name,
                user_email=user.email,
                user_bio=user.bio,
            )
            for application, user in rows
        ]
    )


@router.put(
    "/{event_id}/applications/{application_id}",
    response_model=StatusUpdateResponse,
    summary="Accept or reject application",
)
def update_application_status(
    event_id: str,
    application_id: str,
    payload: ApplicationStatusUpdate,
    lifecycle: LifecycleDep,
    current_user: CurrentUser,
) -> StatusUpdateResponse:
    application = lifecycle.update_status(
        event_id, application_id, payload.status, current_user
    )
    return StatusUpdateResponse(
        message=f"Application {application.status} successfully updated",
        status=application.status,
    )


@router.get(
    "/{event_id}/volunteers",
    response_model=VolunteerListResponse,
    summary="Accepted volunteers for event",
)
def list_event_volunteers(
    event_id: str,
    lifecycle: LifecycleDep,
    current_user: CurrentUser,
) -> VolunteerListResponse:
    rows = lifecycle.accepted_volunteers(event_id, current_user)
    return VolunteerListResponse(
        volunteers=[
            VolunteerRead(
                id=user.id,
                name=user.name,
                email=user.email,
                completed=application.completed,
                rating=application.rating,
            )
            for application, user in rows
        ]
    )


@router.post(
    "/{event_id}/volunteers/{volunteer_id}/complete",
    response_model=CompleteVolunteerResponse,
    summary="Mark volunteer task complete",
)
def complete_volunteer_task(
    event_id: str,
    volunteer_id: str,
    payload: CompleteVolunteerRequest,
    lifecycle: LifecycleDep,
    current_user: CurrentUser,
) -> CompleteVolunteerResponse:
    application = lifecycle.complete(
        event_id,
        volunteer_id,
        current_user,
        completed=payload.completed,
        rating=payload.rating,
    )
    return CompleteVolunteerResponse(
        message="Volunteer status updated successfully",
        volunteer=CompletedVolunteerRead(
            id=application.user_id,
            completed=application.completed,
            rating=application.rating,
        ),
    )
