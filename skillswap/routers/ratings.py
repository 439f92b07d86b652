from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from skillswap.core.config import settings
from skillswap.core.db import get_session
from skillswap.routers.auth import CurrentUserDep, require_user_id
from skillswap.schemas.common import build_pagination, page_offset
from skillswap.schemas.rating import (
    RatingAggregate,
    RatingCreate,
    RatingOut,
    RatingStatistics,
    RatingUpdate,
    SwapRatings,
    UserRatingsPage,
)
from skillswap.services.rating_service import (
    aggregate_for_existing_user,
    aggregate_for_user,
    delete_rating,
    list_public_ratings,
    ratings_for_swap,
    submit_rating,
    update_rating,
)

router = APIRouter(prefix="/ratings", tags=["ratings"])

SessionDep = Annotated[Session, Depends(get_session)]


@router.post("/submit", response_model=RatingOut, status_code=status.HTTP_201_CREATED)
def submit(
    payload: RatingCreate,
    current: CurrentUserDep,
    session: SessionDep,
) -> RatingOut:
    rating = submit_rating(
        session,
        swap_request_id=payload.swap_request_id,
        rater_id=require_user_id(current),
        rated_user_id=payload.rated_user_id,
        value=payload.rating,
        feedback=payload.feedback,
        is_public=payload.is_public,
    )
    return RatingOut.model_validate(rating)


@router.get("/user/{user_id}", response_model=UserRatingsPage)
def ratings_received(
    user_id: int,
    _current: CurrentUserDep,
    session: SessionDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.max_ratings_page_size)] = 10,
) -> UserRatingsPage:
    total_count, ratings = list_public_ratings(
        session,
        user_id,
        limit=limit,
        offset=page_offset(page, limit),
    )
    aggregate = aggregate_for_user(session, user_id)
    return UserRatingsPage(
        ratings=[RatingOut.model_validate(rating) for rating in ratings],
        pagination=build_pagination(page, limit, total_count),
        statistics=RatingStatistics(
            average_rating=aggregate.average_rating,
            total_ratings=aggregate.total_ratings,
        ),
    )


@router.get("/swap/{swap_request_id}", response_model=SwapRatings)
def swap_ratings(
    swap_request_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> SwapRatings:
    return ratings_for_swap(session, swap_request_id, require_user_id(current))


@router.get("/stats/{user_id}", response_model=RatingAggregate)
def rating_stats(
    user_id: int,
    _current: CurrentUserDep,
    session: SessionDep,
) -> RatingAggregate:
    return aggregate_for_existing_user(session, user_id)


@router.put("/{rating_id}", response_model=RatingOut)
def edit_rating(
    rating_id: int,
    payload: RatingUpdate,
    current: CurrentUserDep,
    session: SessionDep,
) -> RatingOut:
    rating = update_rating(session, rating_id, require_user_id(current), payload)
    return RatingOut.model_validate(rating)


@router.delete("/{rating_id}")
def remove_rating(
    rating_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> dict[str, str]:
    delete_rating(session, rating_id, require_user_id(current))
    return {"message": "Rating deleted successfully"}
