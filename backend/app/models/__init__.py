from .application import (
    APPLICATION_STATUSES,
    STATUS_ACCEPTED,
    STATUS_PENDING,
    STATUS_REJECTED,
    Application,
)
from .chat import ChatGroup, ChatGroupMember, ChatMessage
from .event import Event, EventTeamMember
from .notification import Notification
from .review import Review
from .user import ROLE_EVENT_MANAGER, ROLE_VOLUNTEER, User

__all__ = [
    "APPLICATION_STATUSES",
    "Application",
    "ChatGroup",
    "ChatGroupMember",
    "ChatMessage",
    "Event",
    "EventTeamMember",
    "Notification",
    "ROLE_EVENT_MANAGER",
    "ROLE_VOLUNTEER",
    "Review",
    "STATUS_ACCEPTED",
    "STATUS_PENDING",
    "STATUS_REJECTED",
    "User",
]
