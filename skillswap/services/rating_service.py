from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any, cast

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.schema import Table
from sqlmodel import Session, col, select

from skillswap.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from skillswap.models.rating import Rating
from skillswap.models.swap_request import SwapStatus
from skillswap.schemas.rating import (
    RatingAggregate,
    RatingOut,
    RatingUpdate,
    SwapRatings,
)
from skillswap.schemas.swap_request import SwapRequestOut
from skillswap.services.profile_service import get_user_or_404
from skillswap.services.request_service import get_request_or_404

logger = structlog.get_logger("skillswap.rating_service")

RATING_TABLE = cast(Table, Rating.__table__)  # type: ignore[attr-defined]
RATING_VALUES = (1, 2, 3, 4, 5)
ALREADY_RATED_DETAIL = "You have already rated this swap"


def _has_rated(session: Session, swap_request_id: int, rater_id: int) -> bool:
    existing = session.exec(
        select(Rating.id).where(
            Rating.swap_request_id == swap_request_id,
            Rating.rater_id == rater_id,
        )
    ).first()
    return existing is not None


def submit_rating(
    session: Session,
    *,
    swap_request_id: int,
    rater_id: int,
    rated_user_id: int,
    value: int,
    feedback: str | None = None,
    is_public: bool = True,
) -> Rating:
    swap = get_request_or_404(session, swap_request_id)
    if swap.status != SwapStatus.ACCEPTED:
        raise StateError("Can only rate accepted swaps")
    if not swap.is_participant(rater_id):
        raise AuthorizationError("You can only rate swaps you participated in")
    if rated_user_id != swap.other_participant(rater_id):
        raise ValidationError("You can only rate the other participant in the swap")
    if value not in RATING_VALUES:
        raise ValidationError("Rating must be between 1 and 5")

    if _has_rated(session, swap_request_id, rater_id):
        raise ConflictError(ALREADY_RATED_DETAIL)

    rating = Rating(
        swap_request_id=swap_request_id,
        rater_id=rater_id,
        rated_user_id=rated_user_id,
        rating=value,
        feedback=feedback,
        is_public=is_public,
    )
    session.add(rating)
    try:
        session.commit()
    except IntegrityError as err:
        session.rollback()
        raise ConflictError(ALREADY_RATED_DETAIL) from err
    session.refresh(rating)

    logger.info(
        "rating_submitted",
        rating_id=rating.id,
        swap_request_id=swap_request_id,
        rater_id=rater_id,
        rated_user_id=rated_user_id,
    )
    return rating


def _get_owned_rating(
    session: Session,
    rating_id: int,
    actor_id: int,
    forbidden_detail: str,
) -> Rating:
    rating = session.get(Rating, rating_id)
    if rating is None:
        raise NotFoundError("Rating not found")
    if rating.rater_id != actor_id:
        raise AuthorizationError(forbidden_detail)
    return rating


def update_rating(
    session: Session,
    rating_id: int,
    actor_id: int,
    patch: RatingUpdate,
) -> Rating:
    rating = _get_owned_rating(
        session,
        rating_id,
        actor_id,
        "You can only update your own ratings",
    )
    changes = patch.model_dump(exclude_unset=True)
    # value and visibility are non-nullable columns
    for field in ("rating", "is_public"):
        if changes.get(field) is None:
            changes.pop(field, None)
    for field, value in changes.items():
        setattr(rating, field, value)
    rating.updated_at = datetime.utcnow()

    session.add(rating)
    session.commit()
    session.refresh(rating)
    logger.info("rating_updated", rating_id=rating_id, fields=sorted(changes))
    return rating


def delete_rating(session: Session, rating_id: int, actor_id: int) -> None:
    rating = _get_owned_rating(
        session,
        rating_id,
        actor_id,
        "You can only delete your own ratings",
    )
    session.delete(rating)
    session.commit()
    logger.info("rating_deleted", rating_id=rating_id, actor_id=actor_id)


def summarize_distribution(values: Iterable[int]) -> RatingAggregate:
    """Count, mean and 1..5 histogram of the given rating values."""
    distribution = {value: 0 for value in RATING_VALUES}
    for value in values:
        distribution[value] = distribution.get(value, 0) + 1
    return _aggregate_from_distribution(distribution)


def _aggregate_from_distribution(distribution: dict[int, int]) -> RatingAggregate:
    total = sum(distribution.values())
    weighted = sum(value * count for value, count in distribution.items())
    return RatingAggregate(
        average_rating=weighted / total if total else 0.0,
        total_ratings=total,
        distribution=distribution,
    )


def aggregate_for_user(session: Session, user_id: int) -> RatingAggregate:
    statement: Any = (
        select(RATING_TABLE.c.rating, func.count())
        .where(
            RATING_TABLE.c.rated_user_id == user_id,
            RATING_TABLE.c.is_public.is_(True),
        )
        .group_by(RATING_TABLE.c.rating)
    )
    distribution = {value: 0 for value in RATING_VALUES}
    for value, total in session.exec(statement):
        distribution[int(value)] = int(total)
    return _aggregate_from_distribution(distribution)


def aggregate_for_existing_user(session: Session, user_id: int) -> RatingAggregate:
    get_user_or_404(session, user_id)
    return aggregate_for_user(session, user_id)


def list_public_ratings(
    session: Session,
    user_id: int,
    *,
    limit: int,
    offset: int,
) -> tuple[int, list[Rating]]:
    get_user_or_404(session, user_id)
    conditions = [
        Rating.rated_user_id == user_id,
        col(Rating.is_public).is_(True),
    ]
    total_count = int(
        session.exec(
            select(func.count()).select_from(RATING_TABLE).where(*conditions)
        ).one()
    )
    ratings = list(
        session.exec(
            select(Rating)
            .where(*conditions)
            .order_by(col(Rating.created_at).desc(), col(Rating.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total_count, ratings


def ratings_for_swap(
    session: Session,
    swap_request_id: int,
    viewer_id: int,
) -> SwapRatings:
    swap = get_request_or_404(session, swap_request_id)
    if not swap.is_participant(viewer_id):
        raise AuthorizationError(
            "You can only view ratings for swaps you participated in"
        )

    ratings = list(
        session.exec(
            select(Rating)
            .where(Rating.swap_request_id == swap_request_id)
            .order_by(col(Rating.created_at).desc(), col(Rating.id).desc())
        ).all()
    )
    other_user_id = swap.other_participant(viewer_id)
    user_has_rated = any(rating.rater_id == viewer_id for rating in ratings)
    other_user_has_rated = any(rating.rater_id == other_user_id for rating in ratings)

    return SwapRatings(
        swap_request=SwapRequestOut.model_validate(swap, from_attributes=True),
        ratings=[RatingOut.model_validate(rating) for rating in ratings],
        can_rate=swap.status == SwapStatus.ACCEPTED and not user_has_rated,
        user_has_rated=user_has_rated,
        other_user_has_rated=other_user_has_rated,
    )
