"""Celery tasks for notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlmodel import Session

from app.celery_app import celery_app
from app.db import engine
from app.services.notifications import deliver_notification
from app.services.realtime import get_publisher

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def deliver_notification_task(
    self,
    user_id: str,
    text: str,
    category: str,
    event_id: str | None = None,
) -> dict:
    """
    Store a notification and push it to the user's real-time channel.

    Args:
        user_id: User ID to notify
        text: Notification text
        category: Notification category (application, event)
        event_id: Optional event ID

    Returns:
        dict: Result with notification ID
    """
    try:
        with Session(engine) as session:
            notification = deliver_notification(
                session,
                get_publisher(),
                UUID(user_id),
                text,
                category,
                UUID(event_id) if event_id else None,
            )
            return {
                "success": True,
                "notification_id": str(notification.id),
                "user_id": user_id,
            }
    except Exception as exc:
        logger.error(
            f"Error delivering notification to user {user_id}: {exc}",
            exc_info=True,
        )
        raise self.retry(exc=exc)
