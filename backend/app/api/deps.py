from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.core.security import verify_token
from app.db import SessionDep, engine
from app.models import User
from app.services.applications import ApplicationLifecycle
from app.services.notifications import (
    CeleryNotificationSink,
    InlineNotificationSink,
    NotificationSink,
)
from app.services.realtime import Publisher, get_publisher

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_current_user(
    session: SessionDep,
    token: str = Depends(oauth2_scheme),
) -> User:
    try:
        payload = verify_token(token, token_type="access")
        user_id = UUID(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    user = session.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Inactive or missing user",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
PublisherDep = Annotated[Publisher, Depends(get_publisher)]


def get_notifier(publisher: PublisherDep) -> NotificationSink:
    if settings.NOTIFICATIONS_VIA_CELERY:
        return CeleryNotificationSink()
    return InlineNotificationSink(engine, publisher)


def get_lifecycle(
    session: SessionDep,
    notifier: NotificationSink = Depends(get_notifier),
) -> ApplicationLifecycle:
    return ApplicationLifecycle(session, notifier)


LifecycleDep = Annotated[ApplicationLifecycle, Depends(get_lifecycle)]
