from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from skillswap.core.db import get_session
from skillswap.models.skill import SkillOut, SkillType
from skillswap.routers.auth import CurrentUserDep, require_user_id
from skillswap.schemas.skill import SkillCreate
from skillswap.services.skill_service import add_skill, list_skills, remove_skill

router = APIRouter(prefix="/skills", tags=["skills"])

SessionDep = Annotated[Session, Depends(get_session)]


@router.post("/add", response_model=SkillOut, status_code=status.HTTP_201_CREATED)
def create_skill(
    payload: SkillCreate,
    current: CurrentUserDep,
    session: SessionDep,
) -> SkillOut:
    skill = add_skill(session, require_user_id(current), payload.name, payload.type)
    return SkillOut.model_validate(skill)


@router.get("", response_model=list[SkillOut])
def list_my_skills(current: CurrentUserDep, session: SessionDep) -> list[SkillOut]:
    skills = list_skills(session, require_user_id(current))
    return [SkillOut.model_validate(skill) for skill in skills]


@router.get("/offered", response_model=list[SkillOut])
def list_offered(current: CurrentUserDep, session: SessionDep) -> list[SkillOut]:
    skills = list_skills(session, require_user_id(current), SkillType.OFFERED)
    return [SkillOut.model_validate(skill) for skill in skills]


@router.get("/wanted", response_model=list[SkillOut])
def list_wanted(current: CurrentUserDep, session: SessionDep) -> list[SkillOut]:
    skills = list_skills(session, require_user_id(current), SkillType.WANTED)
    return [SkillOut.model_validate(skill) for skill in skills]


@router.delete("/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(
    skill_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> None:
    remove_skill(session, require_user_id(current), skill_id)
