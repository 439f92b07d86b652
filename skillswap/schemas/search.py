from __future__ import annotations

from pydantic import BaseModel

from skillswap.models.swap_request import SwapStatus
from skillswap.schemas.common import Pagination
from skillswap.schemas.profile import UserSummary
from skillswap.schemas.rating import RatingStatistics


class UserSearchPage(BaseModel):
    users: list[UserSummary]
    pagination: Pagination


class PublicProfile(UserSummary):
    rating: RatingStatistics
    has_existing_request: bool
    request_status: SwapStatus | None = None
    mutual_rating_complete: bool


class TrendingSkill(BaseModel):
    name: str
    count: int


class TopRatedUser(BaseModel):
    id: int
    name: str
    profile_photo: str | None = None
    average_rating: float
    total_ratings: int
