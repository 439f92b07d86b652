from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlmodel import Session

from skillswap.core.db import get_session
from skillswap.routers.auth import CurrentUserDep, require_user_id
from skillswap.schemas.profile import ProfileOut, ProfileUpdate
from skillswap.services.profile_service import get_profile, update_profile

router = APIRouter(prefix="/profile", tags=["profile"])

SessionDep = Annotated[Session, Depends(get_session)]


@router.get("", response_model=ProfileOut)
def read_profile(current: CurrentUserDep, session: SessionDep) -> ProfileOut:
    return get_profile(session, require_user_id(current))


@router.put("/update", response_model=ProfileOut)
def edit_profile(
    payload: ProfileUpdate,
    current: CurrentUserDep,
    session: SessionDep,
) -> ProfileOut:
    return update_profile(session, require_user_id(current), payload)
