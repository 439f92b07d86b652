from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import structlog
from sqlmodel import Session, col, select

from skillswap.core.errors import NotFoundError
from skillswap.models.skill import Skill, SkillOut
from skillswap.models.user import User
from skillswap.schemas.profile import ProfileOut, ProfileUpdate, UserSummary

logger = structlog.get_logger("skillswap.profile_service")


def get_user_or_404(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def skills_by_user(
    session: Session,
    user_ids: Iterable[int],
) -> dict[int, list[Skill]]:
    ids = list(set(user_ids))
    grouped: dict[int, list[Skill]] = {user_id: [] for user_id in ids}
    if not ids:
        return grouped
    rows = session.exec(
        select(Skill)
        .where(col(Skill.user_id).in_(ids))
        .order_by(col(Skill.user_id), col(Skill.id))
    ).all()
    for skill in rows:
        grouped.setdefault(skill.user_id, []).append(skill)
    return grouped


def summarize_user(user: User, skills: Iterable[Skill]) -> UserSummary:
    summary = UserSummary.model_validate(user, from_attributes=True)
    summary.skills = [SkillOut.model_validate(skill) for skill in skills]
    return summary


def user_summaries(
    session: Session,
    user_ids: Iterable[int],
) -> dict[int, UserSummary]:
    ids = list(set(user_ids))
    if not ids:
        return {}
    users = session.exec(select(User).where(col(User.id).in_(ids))).all()
    skills = skills_by_user(session, ids)
    return {
        user.id: summarize_user(user, skills.get(user.id, []))
        for user in users
        if user.id is not None
    }


def get_profile(session: Session, user_id: int) -> ProfileOut:
    user = get_user_or_404(session, user_id)
    profile = ProfileOut.model_validate(user, from_attributes=True)
    profile.skills = [
        SkillOut.model_validate(skill)
        for skill in skills_by_user(session, [user_id]).get(user_id, [])
    ]
    return profile


def update_profile(
    session: Session,
    user_id: int,
    payload: ProfileUpdate,
) -> ProfileOut:
    user = get_user_or_404(session, user_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    if changes.get("is_public") is None:
        changes.pop("is_public", None)

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = datetime.utcnow()

    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
    return get_profile(session, user_id)
