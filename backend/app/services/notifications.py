from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy.engine import Engine
from sqlmodel import Session

from app.models import Notification
from app.services.realtime import Publisher, user_channel

logger = logging.getLogger(__name__)

CATEGORY_APPLICATION = "application"
CATEGORY_EVENT = "event"


class NotificationSink(Protocol):
    def notify(
        self,
        user_id: UUID,
        text: str,
        category: str,
        event_id: UUID | None = None,
    ) -> None:
        ...


def create_notification(
    session: Session,
    user_id: UUID,
    message: str,
    category: str,
    event_id: UUID | None = None,
) -> Notification:
    """Create a notification for a user."""
    notification = Notification(
        user_id=user_id,
        event_id=event_id,
        category=category,
        message=message,
    )
    session.add(notification)
    return notification


def push_notification(publisher: Publisher, notification: Notification) -> None:
    publisher.publish(
        user_channel(notification.user_id),
        "notification",
        {
            "id": str(notification.id),
            "category": notification.category,
            "message": notification.message,
            "event_id": str(notification.event_id) if notification.event_id else None,
            "created_at": notification.created_at.isoformat(),
        },
    )


def deliver_notification(
    session: Session,
    publisher: Publisher,
    user_id: UUID,
    text: str,
    category: str,
    event_id: UUID | None = None,
) -> Notification:
    """Store a notification, commit it, then push it to the user's channel."""
    notification = create_notification(session, user_id, text, category, event_id)
    session.commit()
    session.refresh(notification)
    push_notification(publisher, notification)
    logger.info(f"Delivered {category} notification {notification.id} to user {user_id}")
    return notification


class InlineNotificationSink:
    """Delivers in-process, in a session of its own."""

    def __init__(self, engine: Engine, publisher: Publisher):
        self.engine = engine
        self.publisher = publisher

    def notify(
        self,
        user_id: UUID,
        text: str,
        category: str,
        event_id: UUID | None = None,
    ) -> None:
        with Session(self.engine) as session:
            deliver_notification(session, self.publisher, user_id, text, category, event_id)


class CeleryNotificationSink:
    """Queues delivery on the Celery worker."""

    def notify(
        self,
        user_id: UUID,
        text: str,
        category: str,
        event_id: UUID | None = None,
    ) -> None:
        from app.core.celery_utils import safe_celery_delay
        from app.tasks.notifications import deliver_notification_task

        safe_celery_delay(
            deliver_notification_task,
            str(user_id),
            text,
            category,
            str(event_id) if event_id else None,
        )
