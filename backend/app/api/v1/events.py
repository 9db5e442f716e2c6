from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status
from sqlalchemy import func
from sqlmodel import and_, delete, select

from app.api.deps import CurrentUser
from app.db import SessionDep
from app.models import (
    ROLE_EVENT_MANAGER,
    Application,
    Event,
    EventTeamMember,
    User,
)
from app.schemas import (
    ApplicationRead,
    EventCreate,
    EventDetail,
    EventMutationResponse,
    EventRead,
    EventSummary,
    EventUpdate,
    MessageResponse,
    PaginatedResponse,
    PaginationParams,
)
from app.services.chat_groups import delete_group, ensure_group
from app.services.concurrency import claim_version, unit_of_work
from app.services.errors import Forbidden, NotFound, parse_uuid
from app.services.membership import add_team_member, team_member_ids

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_filter(*, created_by: Optional[UUID], day: Optional[date]):
    conditions = []
    if created_by:
        conditions.append(Event.created_by == created_by)
    if day:
        starts = datetime.combine(day, time.min, tzinfo=timezone.utc)
        conditions.append(Event.date >= starts)
        conditions.append(Event.date < starts + timedelta(days=1))
    return and_(*conditions) if conditions else None


def _applied_event_ids(session: SessionDep, user_id: UUID) -> set[UUID]:
    return set(
        session.exec(
            select(Application.event_id).where(Application.user_id == user_id)
        ).all()
    )


def _serialize_event(event: Event, applied: set[UUID]) -> EventRead:
    return EventRead.model_validate(event).model_copy(
        update={"has_applied": event.id in applied}
    )


def _get_owned_event(session: SessionDep, event_id: str, user: User, action: str) -> Event:
    event = session.get(Event, parse_uuid(event_id, "event"))
    if not event:
        raise NotFound("Event not found")
    if event.created_by != user.id:
        raise Forbidden(f"Not authorized to {action} this event")
    return event


@router.get("/", response_model=PaginatedResponse[EventRead], summary="List events")
def list_events(
    session: SessionDep,
    current_user: CurrentUser,
    page: int = Query(default=1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(default=20, ge=1, le=100, description="Items per page"),
    day: Optional[date] = Query(
        default=None, alias="date", description="Only events on this day (UTC)"
    ),
) -> PaginatedResponse[EventRead]:
    pagination = PaginationParams(page=page, limit=limit)
    # Managers see their own events, volunteers see everything
    created_by = current_user.id if current_user.role == ROLE_EVENT_MANAGER else None
    filter_expr = _build_filter(created_by=created_by, day=day)

    count_statement = select(func.count()).select_from(Event)
    statement = select(Event)
    if filter_expr is not None:
        count_statement = count_statement.where(filter_expr)
        statement = statement.where(filter_expr)

    total = session.exec(count_statement).one()
    events = session.exec(
        statement.order_by(Event.date).offset(pagination.skip).limit(pagination.limit)
    ).all()

    applied = _applied_event_ids(session, current_user.id)
    return PaginatedResponse.create(
        items=[_serialize_event(event, applied) for event in events],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.get("/created", response_model=List[EventSummary], summary="Events created by me")
def list_created_events(
    session: SessionDep,
    current_user: CurrentUser,
) -> List[Event]:
    return session.exec(
        select(Event)
        .where(Event.created_by == current_user.id)
        .order_by(Event.date)
    ).all()


@router.get("/volunteer", response_model=List[EventRead], summary="Events I am on the team of")
def list_volunteer_events(
    session: SessionDep,
    current_user: CurrentUser,
) -> List[EventRead]:
    team_events = select(EventTeamMember.event_id).where(
        EventTeamMember.user_id == current_user.id
    )
    events = session.exec(
        select(Event).where(Event.id.in_(team_events)).order_by(Event.date)
    ).all()
    applied = _applied_event_ids(session, current_user.id)
    return [_serialize_event(event, applied) for event in events]


@router.get("/{event_id}", response_model=EventDetail, summary="Get event by id")
def get_event(
    event_id: str,
    session: SessionDep,
    current_user: CurrentUser,
) -> EventDetail:
    event = session.get(Event, parse_uuid(event_id, "event"))
    if not event:
        raise NotFound("Event not found")

    applicants = session.exec(
        select(Application)
        .where(Application.event_id == event.id)
        .order_by(Application.applied_at, Application.id)
    ).all()
    return EventDetail.model_validate(event).model_copy(
        update={
            "has_applied": any(a.user_id == current_user.id for a in applicants),
            "applicants": [ApplicationRead.model_validate(a) for a in applicants],
            "team_member_ids": team_member_ids(session, event.id),
        }
    )


@router.post(
    "/",
    response_model=EventMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create event",
)
def create_event(
    payload: EventCreate,
    session: SessionDep,
    current_user: CurrentUser,
) -> EventMutationResponse:
    if current_user.role != ROLE_EVENT_MANAGER:
        raise Forbidden("Only event managers can create events")

    event = Event(**payload.model_dump(), created_by=current_user.id)
    with unit_of_work(session):
        session.add(event)
        session.flush()
        add_team_member(session, event.id, current_user.id)
        ensure_group(
            session,
            event.id,
            [current_user.id],
            welcome_text=f'Welcome to the "{event.title}" chat!',
            sender_id=current_user.id,
        )
    session.refresh(event)

    logger.info(f"Event {event.id} created by {current_user.id}")
    return EventMutationResponse(
        message="Event created successfully",
        event=_serialize_event(event, set()),
    )


@router.put("/{event_id}", response_model=EventMutationResponse, summary="Update event")
def update_event(
    event_id: str,
    payload: EventUpdate,
    session: SessionDep,
    current_user: CurrentUser,
) -> EventMutationResponse:
    event = _get_owned_event(session, event_id, current_user, "update")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    with unit_of_work(session):
        for field, value in data.items():
            setattr(event, field, value)
        event.touch()
        session.add(event)
        claim_version(session, event)
    session.refresh(event)

    return EventMutationResponse(
        message="Event updated successfully",
        event=_serialize_event(event, _applied_event_ids(session, current_user.id)),
    )


@router.delete("/{event_id}", response_model=MessageResponse, summary="Delete event")
def delete_event(
    event_id: str,
    session: SessionDep,
    current_user: CurrentUser,
) -> MessageResponse:
    event = _get_owned_event(session, event_id, current_user, "delete")

    with unit_of_work(session):
        delete_group(session, event.id)
        session.exec(delete(EventTeamMember).where(EventTeamMember.event_id == event.id))
        session.exec(delete(Application).where(Application.event_id == event.id))
        session.delete(event)

    logger.info(f"Event {event_id} deleted by {current_user.id}")
    return MessageResponse(message="Event deleted successfully")
