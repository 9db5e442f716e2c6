"""
Application lifecycle: apply, accept/reject, complete and rate.

Status changes and completions run as one unit of work that also bumps the
event's version, so two managers racing on the same event cannot both commit.
Applies rely on the per-user unique constraint instead. Notifications go out
after the commit and never fail the operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models import (
    APPLICATION_STATUSES,
    ROLE_EVENT_MANAGER,
    ROLE_VOLUNTEER,
    STATUS_ACCEPTED,
    STATUS_PENDING,
    Application,
    Event,
    User,
)
from app.models.types import utcnow
from app.services.concurrency import claim_version, unit_of_work
from app.services.errors import Conflict, Forbidden, NotFound, ValidationFailed, parse_uuid
from app.services.membership import admit_accepted_applicant
from app.services.notifications import (
    CATEGORY_APPLICATION,
    CATEGORY_EVENT,
    NotificationSink,
)
from app.services.ratings import MAX_RATING, MIN_RATING, add_review

logger = logging.getLogger(__name__)


def normalize_status(value: str) -> str:
    status = value.strip().lower() if isinstance(value, str) else ""
    if status not in APPLICATION_STATUSES:
        raise ValidationFailed(
            f"Invalid status '{value}', expected one of: {', '.join(APPLICATION_STATUSES)}"
        )
    return status


class ApplicationLifecycle:
    def __init__(
        self,
        session: Session,
        notifier: NotificationSink,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.notifier = notifier
        self.clock = clock

    # Commands

    def apply(self, event_id: str | UUID, caller: User) -> Event:
        """Submit ``caller``'s pending application to an upcoming event."""
        if caller.role == ROLE_EVENT_MANAGER:
            raise Forbidden("Event managers cannot apply for events")

        event = self._get_event(event_id)
        if event.date <= self.clock():
            raise Conflict("Cannot apply to past events")
        if self._find_application(event.id, caller.id) is not None:
            raise Conflict("You have already applied for this event")

        # Only the (event, user) constraint serialises applies, so applicants
        # to the same event never block each other.
        try:
            with unit_of_work(self.session):
                self.session.add(
                    Application(
                        event_id=event.id,
                        user_id=caller.id,
                        status=STATUS_PENDING,
                        applied_at=self.clock(),
                    )
                )
        except IntegrityError:
            logger.info(f"Duplicate application by {caller.id} for event {event.id}")
            raise Conflict("You have already applied for this event")

        logger.info(f"User {caller.id} applied for event {event.id}")
        self._notify(
            event.created_by,
            f'{caller.name} has applied for your event "{event.title}".',
            CATEGORY_APPLICATION,
            event.id,
        )
        return event

    def update_status(
        self,
        event_id: str | UUID,
        application_id: str | UUID,
        new_status: str,
        caller: User,
    ) -> Application:
        """Set an application's status; acceptance also admits the volunteer."""
        application_uuid = parse_uuid(application_id, "application")
        event = self._get_event(event_id)
        self._require_creator(event, caller, "Only the event creator can update application status")

        application = self.session.get(Application, application_uuid)
        if application is None or application.event_id != event.id:
            raise NotFound("Application not found")

        status = normalize_status(new_status)
        previous = application.status

        with unit_of_work(self.session):
            application.status = status
            self.session.add(application)
            if status == STATUS_ACCEPTED:
                admit_accepted_applicant(self.session, event, application)
            claim_version(self.session, event)

        logger.info(
            f"Application {application.id} for event {event.id}: {previous} -> {status}"
        )
        if status != STATUS_PENDING:
            self._notify(
                application.user_id,
                f'Your application for "{event.title}" was {status}.',
                CATEGORY_APPLICATION,
                event.id,
            )
        return application

    def complete(
        self,
        event_id: str | UUID,
        volunteer_id: str | UUID,
        caller: User,
        completed: bool = True,
        rating: int | None = None,
    ) -> Application:
        """Mark an accepted volunteer's work as complete, optionally rating it."""
        event_uuid = parse_uuid(event_id, "event")
        volunteer_uuid = parse_uuid(volunteer_id, "volunteer")
        if rating is not None and not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationFailed(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        event = self._get_event(event_uuid)
        self._require_creator(event, caller, "Not authorized to manage volunteers for this event")

        application = self.session.exec(
            select(Application).where(
                Application.event_id == event.id,
                Application.user_id == volunteer_uuid,
                Application.status == STATUS_ACCEPTED,
            )
        ).first()
        if application is None:
            raise NotFound("Volunteer not found in event or not accepted")
        if application.completed:
            raise Conflict("Volunteer task already marked as complete")

        volunteer = None
        if rating is not None:
            volunteer = self.session.get(User, volunteer_uuid)
            if volunteer is None:
                raise NotFound("Volunteer user not found")

        with unit_of_work(self.session):
            application.completed = completed
            if rating is not None:
                application.rating = rating
            self.session.add(application)
            if volunteer is not None:
                add_review(
                    self.session,
                    volunteer,
                    event_manager_id=caller.id,
                    event_id=event.id,
                    rating=rating,
                    reviewed_at=self.clock(),
                )
            claim_version(self.session, event)

        logger.info(
            f"Volunteer {volunteer_uuid} completed={completed} for event {event.id}, rating={rating}"
        )
        if completed:
            if rating is not None:
                text = (
                    f'Your task for event "{event.title}" has been marked as complete '
                    f"with a rating of {rating} stars."
                )
            else:
                text = f'Your task for event "{event.title}" has been marked as complete.'
            self._notify(volunteer_uuid, text, CATEGORY_EVENT, event.id)
        return application

    # Queries

    def applications_for(self, event_id: UUID) -> list[Application]:
        return self.session.exec(
            select(Application)
            .where(Application.event_id == event_id)
            .order_by(Application.applied_at, Application.id)
        ).all()

    def event_applications(
        self, event_id: str | UUID, caller: User
    ) -> list[tuple[Application, User]]:
        event = self._get_event(event_id)
        self._require_creator(event, caller, "Only the event creator can view applications")
        return self.session.exec(
            select(Application, User)
            .join(User, Application.user_id == User.id)
            .where(Application.event_id == event.id)
            .order_by(Application.applied_at, Application.id)
        ).all()

    def accepted_volunteers(
        self, event_id: str | UUID, caller: User
    ) -> list[tuple[Application, User]]:
        event = self._get_event(event_id)
        self._require_creator(event, caller, "Not authorized to view volunteers for this event")
        return self.session.exec(
            select(Application, User)
            .join(User, Application.user_id == User.id)
            .where(
                Application.event_id == event.id,
                Application.status == STATUS_ACCEPTED,
            )
            .order_by(Application.applied_at, Application.id)
        ).all()

    def my_applications(self, caller: User) -> list[tuple[Application, Event, User]]:
        if caller.role != ROLE_VOLUNTEER:
            raise Forbidden("Only volunteers can view their applications")
        return self.session.exec(
            select(Application, Event, User)
            .join(Event, Application.event_id == Event.id)
            .join(User, Event.created_by == User.id)
            .where(Application.user_id == caller.id)
            .order_by(Event.date)
        ).all()

    # Helpers

    def _get_event(self, event_id: str | UUID) -> Event:
        event = self.session.get(Event, parse_uuid(event_id, "event"))
        if event is None:
            raise NotFound("Event not found")
        return event

    def _find_application(self, event_id: UUID, user_id: UUID) -> Application | None:
        return self.session.exec(
            select(Application).where(
                Application.event_id == event_id,
                Application.user_id == user_id,
            )
        ).first()

    @staticmethod
    def _require_creator(event: Event, caller: User, detail: str) -> None:
        if event.created_by != caller.id:
            raise Forbidden(detail)

    def _notify(
        self, user_id: UUID, text: str, category: str, event_id: UUID | None
    ) -> None:
        try:
            self.notifier.notify(user_id, text, category, event_id)
        except Exception:
            logger.warning(f"Notification to user {user_id} failed", exc_info=True)
