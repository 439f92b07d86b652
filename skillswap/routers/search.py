from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlmodel import Session

from skillswap.core.config import settings
from skillswap.core.db import get_session
from skillswap.routers.auth import CurrentUserDep, require_user_id
from skillswap.schemas.common import build_pagination, page_offset
from skillswap.schemas.search import (
    PublicProfile,
    TopRatedUser,
    TrendingSkill,
    UserSearchPage,
)
from skillswap.services.search_service import (
    get_public_profile,
    search_users,
    skill_directory,
    top_rated_users,
    trending_skills,
)

router = APIRouter(prefix="/search", tags=["search"])

SessionDep = Annotated[Session, Depends(get_session)]


@router.get("/users", response_model=UserSearchPage)
def find_users(
    current: CurrentUserDep,
    session: SessionDep,
    response: Response,
    skill: Annotated[str | None, Query(max_length=100)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> UserSearchPage:
    total_count, users = search_users(
        session,
        require_user_id(current),
        skill=skill,
        limit=limit,
        offset=page_offset(page, limit),
    )
    response.headers["X-Total-Count"] = str(total_count)
    return UserSearchPage(
        users=users,
        pagination=build_pagination(page, limit, total_count),
    )


@router.get("/users/{user_id}", response_model=PublicProfile)
def view_user(
    user_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> PublicProfile:
    return get_public_profile(session, require_user_id(current), user_id)


@router.get("/skills", response_model=dict[str, list[str]])
def list_skill_names(_current: CurrentUserDep, session: SessionDep) -> dict[str, list[str]]:
    return skill_directory(session)


@router.get("/trending-skills", response_model=list[TrendingSkill])
def list_trending_skills(_current: CurrentUserDep, session: SessionDep) -> list[TrendingSkill]:
    return trending_skills(session)


@router.get("/top-ratings", response_model=list[TopRatedUser])
def list_top_rated(_current: CurrentUserDep, session: SessionDep) -> list[TopRatedUser]:
    return top_rated_users(session)
