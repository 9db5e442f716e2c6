from fastapi import APIRouter

from app.api.v1 import (
    applications,
    chat,
    dashboard,
    events,
    health,
    notifications,
    users,
    websocket,
)


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
# Static /events/my-applications must match before /events/{event_id}
api_router.include_router(applications.router, prefix="/events", tags=["applications"])
api_router.include_router(chat.router, prefix="/events", tags=["chat"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(websocket.router, prefix="/ws", tags=["websocket"])
