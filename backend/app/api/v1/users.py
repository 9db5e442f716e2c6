from __future__ import annotations

from fastapi import APIRouter
from sqlmodel import Session

from app.api.deps import CurrentUser
from app.db import SessionDep
from app.models import ROLE_VOLUNTEER, User
from app.schemas import ParticipationStats, RatingSummary, ReviewRead, UserRead, VolunteerProfile
from app.services.dashboard import participation_for
from app.services.errors import NotFound, ValidationFailed, parse_uuid
from app.services.ratings import list_reviews

router = APIRouter()


def _rating_summary(session: Session, user: User) -> RatingSummary:
    return RatingSummary(
        user_id=user.id,
        average_rating=user.average_rating,
        total_ratings=user.total_ratings,
        reviews=[ReviewRead.model_validate(r) for r in list_reviews(session, user.id)],
    )


@router.get("/me", response_model=UserRead, summary="Get current user")
def read_current_user(current_user: CurrentUser) -> User:
    return current_user


@router.get("/{user_id}/ratings", response_model=RatingSummary, summary="Get user ratings")
def read_user_ratings(
    user_id: str,
    session: SessionDep,
    current_user: CurrentUser,
) -> RatingSummary:
    user = session.get(User, parse_uuid(user_id, "user"))
    if not user:
        raise NotFound("User not found")

    return _rating_summary(session, user)


@router.get(
    "/{user_id}/volunteer-profile",
    response_model=VolunteerProfile,
    summary="Get volunteer profile",
)
def read_volunteer_profile(
    user_id: str,
    session: SessionDep,
    current_user: CurrentUser,
) -> VolunteerProfile:
    """Public volunteer profile with participation stats and ratings."""
    user = session.get(User, parse_uuid(user_id, "user"))
    if not user:
        raise NotFound("User not found")
    if user.role != ROLE_VOLUNTEER:
        raise ValidationFailed(f"This user is not a volunteer. User role is: {user.role}")

    participation = participation_for(session, user.id)
    return VolunteerProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        bio=user.bio,
        role=user.role,
        events_participated=ParticipationStats.model_validate(participation),
        ratings=_rating_summary(session, user),
    )
