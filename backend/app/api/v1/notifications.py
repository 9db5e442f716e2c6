from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Query
from sqlalchemy import func
from sqlmodel import select

from app.api.deps import CurrentUser
from app.db import SessionDep
from app.models import Notification
from app.models.types import utcnow
from app.schemas import NotificationRead, NotificationUpdate
from app.services.errors import Forbidden, NotFound, parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter()


def _visible(user_id):
    return select(Notification).where(
        Notification.user_id == user_id,
        Notification.is_deleted == False,  # noqa: E712
    )


@router.get("/", response_model=List[NotificationRead], summary="List notifications")
def list_notifications(
    session: SessionDep,
    current_user: CurrentUser,
    unread_only: bool = Query(default=False, description="Show only unread notifications"),
    limit: int = Query(default=50, ge=1, le=100, description="Maximum number of notifications"),
) -> List[Notification]:
    """Get user's notifications, newest first."""
    statement = _visible(current_user.id)
    if unread_only:
        statement = statement.where(Notification.is_read == False)  # noqa: E712

    statement = statement.order_by(Notification.created_at.desc()).limit(limit)
    return session.exec(statement).all()


@router.get("/unread-count", summary="Get unread notifications count")
def get_unread_count(
    session: SessionDep,
    current_user: CurrentUser,
) -> dict:
    statement = (
        select(func.count())
        .select_from(Notification)
        .where(
            Notification.user_id == current_user.id,
            Notification.is_read == False,  # noqa: E712
            Notification.is_deleted == False,  # noqa: E712
        )
    )
    return {"count": session.exec(statement).one()}


@router.patch("/mark-all-read", summary="Mark all notifications as read")
def mark_all_read(
    session: SessionDep,
    current_user: CurrentUser,
) -> dict:
    notifications = session.exec(
        _visible(current_user.id).where(Notification.is_read == False)  # noqa: E712
    ).all()

    now = utcnow()
    for notification in notifications:
        notification.is_read = True
        notification.read_at = now
        session.add(notification)

    session.commit()
    logger.debug(f"Marked {len(notifications)} notifications read for {current_user.id}")
    return {"marked": len(notifications)}


@router.patch(
    "/{notification_id}",
    response_model=NotificationRead,
    summary="Update notification",
)
def update_notification(
    notification_id: str,
    data: NotificationUpdate,
    session: SessionDep,
    current_user: CurrentUser,
) -> Notification:
    """Mark as read/unread or soft delete."""
    notification = session.get(Notification, parse_uuid(notification_id, "notification"))
    if not notification:
        raise NotFound("Notification not found")
    if notification.user_id != current_user.id:
        raise Forbidden("Not your notification")

    if data.is_read is not None:
        notification.is_read = data.is_read
        if data.is_read and not notification.read_at:
            notification.read_at = utcnow()
        elif not data.is_read:
            notification.read_at = None

    if data.is_deleted is not None:
        notification.is_deleted = data.is_deleted
        if data.is_deleted and not notification.deleted_at:
            notification.deleted_at = utcnow()
        elif not data.is_deleted:
            notification.deleted_at = None

    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification
