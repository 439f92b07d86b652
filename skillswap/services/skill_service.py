from __future__ import annotations

from typing import Any, cast

import structlog
from sqlalchemy import update
from sqlalchemy.sql.schema import Table
from sqlmodel import Session, col, select

from skillswap.core.errors import AuthorizationError, NotFoundError
from skillswap.models.report import Report
from skillswap.models.skill import Skill, SkillType

logger = structlog.get_logger("skillswap.skill_service")

REPORT_TABLE = cast(Table, Report.__table__)  # type: ignore[attr-defined]


def add_skill(session: Session, user_id: int, name: str, skill_type: SkillType) -> Skill:
    skill = Skill(user_id=user_id, name=name, type=skill_type)
    session.add(skill)
    session.commit()
    session.refresh(skill)
    logger.info("skill_added", skill_id=skill.id, user_id=user_id, type=skill_type.value)
    return skill


def list_skills(
    session: Session,
    user_id: int,
    skill_type: SkillType | None = None,
) -> list[Skill]:
    statement = select(Skill).where(Skill.user_id == user_id)
    if skill_type is not None:
        statement = statement.where(Skill.type == skill_type)
    statement = statement.order_by(col(Skill.id))
    return list(session.exec(statement).all())


def get_skill_or_404(session: Session, skill_id: int) -> Skill:
    skill = session.get(Skill, skill_id)
    if skill is None:
        raise NotFoundError("Skill not found")
    return skill


def stage_skill_deletion(session: Session, skill: Skill) -> None:
    """Delete the skill and unlink reports filed against it; caller commits."""
    detach: Any = (
        update(REPORT_TABLE)
        .where(REPORT_TABLE.c.reported_skill_id == skill.id)
        .values(reported_skill_id=None)
    )
    session.exec(detach)
    session.delete(skill)


def remove_skill(session: Session, user_id: int, skill_id: int) -> None:
    skill = get_skill_or_404(session, skill_id)
    if skill.user_id != user_id:
        raise AuthorizationError("Unauthorized to delete this skill")
    stage_skill_deletion(session, skill)
    session.commit()
    logger.info("skill_removed", skill_id=skill_id, user_id=user_id)
