from .application import (
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
from .chat import ChatGroupRead, ChatMessageCreate, ChatMessageRead
from .dashboard import DashboardRead, UpcomingEventRead
from .event import (
    EventCreate,
    EventDetail,
    EventMutationResponse,
    EventRead,
    EventSummary,
    EventUpdate,
    MessageResponse,
)
from .notification import NotificationRead, NotificationUpdate
from .pagination import PaginatedResponse, PaginationParams
from .user import (
    ParticipationStats,
    RatingSummary,
    ReviewRead,
    UserRead,
    VolunteerProfile,
)

__all__ = [
    "ApplicantListResponse",
    "ApplicantRead",
    "ApplicationRead",
    "ApplicationStatusUpdate",
    "ApplyResponse",
    "ChatGroupRead",
    "ChatMessageCreate",
    "ChatMessageRead",
    "CompletedVolunteerRead",
    "CompleteVolunteerRequest",
    "CompleteVolunteerResponse",
    "DashboardRead",
    "EventApplicantsRead",
    "EventCreate",
    "EventDetail",
    "EventMutationResponse",
    "EventRead",
    "EventSummary",
    "EventUpdate",
    "MessageResponse",
    "MyApplicationRead",
    "NotificationRead",
    "NotificationUpdate",
    "PaginatedResponse",
    "PaginationParams",
    "ParticipationStats",
    "RatingSummary",
    "ReviewRead",
    "StatusUpdateResponse",
    "UpcomingEventRead",
    "UserRead",
    "VolunteerListResponse",
    "VolunteerProfile",
    "VolunteerRead",
]
