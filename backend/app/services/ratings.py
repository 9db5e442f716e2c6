from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlmodel import Session, select

from app.models import Review, User
from app.models.types import utcnow
from app.services.concurrency import claim_version
from app.services.errors import Conflict

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def summarize_ratings(ratings: Iterable[int]) -> tuple[float, int]:
    """Return ``(average, count)`` as a plain arithmetic mean."""
    values = list(ratings)
    if not values:
        return 0.0, 0
    return sum(values) / len(values), len(values)


def list_reviews(session: Session, volunteer_id: UUID) -> list[Review]:
    return session.exec(
        select(Review)
        .where(Review.volunteer_id == volunteer_id)
        .order_by(Review.date, Review.id)
    ).all()


def add_review(
    session: Session,
    volunteer: User,
    event_manager_id: UUID,
    event_id: UUID,
    rating: int,
    reviewed_at: datetime | None = None,
) -> Review:
    """
    Record a manager's review of a volunteer and recompute the aggregate.

    Raises ``Conflict`` before touching the volunteer when this manager has
    already rated the volunteer for this event. The caller commits.
    """
    existing = session.exec(
        select(Review).where(
            Review.volunteer_id == volunteer.id,
            Review.event_manager_id == event_manager_id,
            Review.event_id == event_id,
        )
    ).first()
    if existing:
        raise Conflict("You have already rated this volunteer for this event")

    review = Review(
        volunteer_id=volunteer.id,
        event_manager_id=event_manager_id,
        event_id=event_id,
        rating=rating,
        date=reviewed_at or utcnow(),
    )
    session.add(review)
    session.flush()

    all_ratings = session.exec(
        select(Review.rating).where(Review.volunteer_id == volunteer.id)
    ).all()
    volunteer.average_rating, volunteer.total_ratings = summarize_ratings(all_ratings)
    session.add(volunteer)
    claim_version(session, volunteer)

    logger.info(
        f"Volunteer {volunteer.id} rated {rating} for event {event_id}: "
        f"average={volunteer.average_rating:.2f} over {volunteer.total_ratings} reviews"
    )
    return review
