from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from skillswap.schemas.common import Pagination
from skillswap.schemas.swap_request import SwapRequestOut


class RatingCreate(BaseModel):
    swap_request_id: int
    rated_user_id: int
    rating: int = Field(ge=1, le=5)
    feedback: str | None = Field(default=None, max_length=2000)
    is_public: bool = True


class RatingUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    feedback: str | None = Field(default=None, max_length=2000)
    is_public: bool | None = None


class RatingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    swap_request_id: int
    rater_id: int
    rated_user_id: int
    rating: int
    feedback: str | None = None
    is_public: bool
    created_at: datetime
    updated_at: datetime


class RatingAggregate(BaseModel):
    average_rating: float
    total_ratings: int
    distribution: dict[int, int]


class RatingStatistics(BaseModel):
    average_rating: float
    total_ratings: int


class UserRatingsPage(BaseModel):
    ratings: list[RatingOut]
    pagination: Pagination
    statistics: RatingStatistics


class SwapRatings(BaseModel):
    swap_request: SwapRequestOut
    ratings: list[RatingOut]
    can_rate: bool
    user_has_rated: bool
    other_user_has_rated: bool
