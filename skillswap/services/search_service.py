from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy import select as sa_select
from sqlmodel import Session, col, select

from skillswap.core.errors import NotFoundError
from skillswap.models.rating import Rating
from skillswap.models.skill import Skill, SkillType
from skillswap.models.swap_request import SwapRequest, SwapStatus, sorted_pair
from skillswap.models.user import User
from skillswap.schemas.profile import UserSummary
from skillswap.schemas.rating import RatingStatistics
from skillswap.schemas.search import PublicProfile, TopRatedUser, TrendingSkill
from skillswap.services.profile_service import skills_by_user, summarize_user
from skillswap.services.rating_service import aggregate_for_user
from skillswap.services.visibility import (
    locked_counterparts,
    mutual_rating_complete,
    unresolved_accepted_swap,
)

TRENDING_LIMIT = 10
TOP_RATED_LIMIT = 5


def _ratings_for_swaps(session: Session, swaps: Iterable[SwapRequest]) -> list[Rating]:
    swap_ids = [swap.id for swap in swaps if swap.id is not None]
    if not swap_ids:
        return []
    return list(
        session.exec(
            select(Rating).where(col(Rating.swap_request_id).in_(swap_ids))
        ).all()
    )


def excluded_user_ids(session: Session, viewer_id: int) -> set[int]:
    accepted = list(
        session.exec(
            select(SwapRequest).where(
                SwapRequest.status == SwapStatus.ACCEPTED,
                or_(
                    SwapRequest.sender_id == viewer_id,
                    SwapRequest.receiver_id == viewer_id,
                ),
            )
        ).all()
    )
    ratings = _ratings_for_swaps(session, accepted)
    return locked_counterparts(viewer_id, accepted, ratings) | {viewer_id}


def search_users(
    session: Session,
    viewer_id: int,
    *,
    skill: str | None,
    limit: int,
    offset: int,
) -> tuple[int, list[UserSummary]]:
    conditions: list[Any] = [
        col(User.is_public).is_(True),
        col(User.id).notin_(excluded_user_ids(session, viewer_id)),
    ]
    term = (skill or "").strip().lower()
    if term:
        matching_owners = sa_select(Skill.user_id).where(
            func.lower(Skill.name).contains(term, autoescape=True)
        )
        conditions.append(col(User.id).in_(matching_owners))

    total_count = int(
        session.exec(select(func.count(col(User.id))).where(*conditions)).one()
    )
    users = list(
        session.exec(
            select(User)
            .where(*conditions)
            .order_by(col(User.created_at).desc(), col(User.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    skills = skills_by_user(session, [user.id for user in users if user.id is not None])
    return total_count, [
        summarize_user(user, skills.get(user.id or 0, [])) for user in users
    ]


def get_public_profile(
    session: Session,
    viewer_id: int,
    user_id: int,
) -> PublicProfile:
    user = session.get(User, user_id)
    if user is None or not user.is_public:
        raise NotFoundError("User not found or profile is private")

    low, high = sorted_pair(viewer_id, user_id)
    swaps = list(
        session.exec(
            select(SwapRequest).where(
                SwapRequest.pair_low_id == low,
                SwapRequest.pair_high_id == high,
                col(SwapRequest.status).in_(
                    [SwapStatus.PENDING, SwapStatus.ACCEPTED]
                ),
            )
        ).all()
    )
    ratings = _ratings_for_swaps(session, swaps)

    request_status: SwapStatus | None = None
    if any(swap.status == SwapStatus.PENDING for swap in swaps):
        request_status = SwapStatus.PENDING
    elif unresolved_accepted_swap(viewer_id, user_id, swaps, ratings) is not None:
        request_status = SwapStatus.ACCEPTED
    mutual_complete = any(
        swap.status == SwapStatus.ACCEPTED and mutual_rating_complete(swap, ratings)
        for swap in swaps
    )

    summary = summarize_user(user, skills_by_user(session, [user_id]).get(user_id, []))
    aggregate = aggregate_for_user(session, user_id)
    return PublicProfile(
        **summary.model_dump(),
        rating=RatingStatistics(
            average_rating=aggregate.average_rating,
            total_ratings=aggregate.total_ratings,
        ),
        has_existing_request=request_status is not None,
        request_status=request_status,
        mutual_rating_complete=mutual_complete,
    )


def skill_directory(session: Session) -> dict[str, list[str]]:
    statement: Any = (
        sa_select(Skill.name, Skill.type)
        .join(User, col(User.id) == col(Skill.user_id))
        .where(col(User.is_public).is_(True))
        .distinct()
    )
    grouped: dict[str, set[str]] = {skill_type.value: set() for skill_type in SkillType}
    for name, skill_type in session.exec(statement):
        key = skill_type.value if isinstance(skill_type, SkillType) else str(skill_type)
        grouped.setdefault(key, set()).add(name)
    return {key: sorted(names) for key, names in grouped.items()}


def trending_skills(session: Session, limit: int = TRENDING_LIMIT) -> list[TrendingSkill]:
    usage = func.count(col(Skill.id))
    statement: Any = (
        sa_select(Skill.name, usage)
        .join(User, col(User.id) == col(Skill.user_id))
        .where(col(User.is_public).is_(True))
        .group_by(col(Skill.name))
        .order_by(usage.desc(), col(Skill.name))
        .limit(limit)
    )
    return [
        TrendingSkill(name=name, count=int(count))
        for name, count in session.exec(statement)
    ]


def top_rated_users(session: Session, limit: int = TOP_RATED_LIMIT) -> list[TopRatedUser]:
    average = func.avg(col(Rating.rating))
    total = func.count(col(Rating.id))
    statement: Any = (
        sa_select(User.id, User.name, User.profile_photo, average, total)
        .join(Rating, col(Rating.rated_user_id) == col(User.id))
        .where(col(User.is_public).is_(True), col(Rating.is_public).is_(True))
        .group_by(col(User.id), col(User.name), col(User.profile_photo))
        .order_by(average.desc(), total.desc(), col(User.id))
        .limit(limit)
    )
    return [
        TopRatedUser(
            id=user_id,
            name=name,
            profile_photo=profile_photo,
            average_rating=float(avg_rating or 0),
            total_ratings=int(count),
        )
        for user_id, name, profile_photo, avg_rating, count in session.exec(statement)
    ]
