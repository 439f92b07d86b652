"""Admin moderation: bans, roles, skill flags, reports and the audit trail.

Every mutating action writes an ``AdminLog`` row in the same transaction as
the change it records.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import structlog
from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from skillswap.core.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from skillswap.models.admin_log import AdminLog
from skillswap.models.report import Report, ReportOut, ReportStatus, ReportType
from skillswap.models.skill import Skill, SkillDetail
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.models.user import ADMIN_ROLES, User, UserRole
from skillswap.schemas.admin import (
    BAN_DAYS,
    AdminUserDetail,
    BanDuration,
    ReportCreate,
    UserStatusFilter,
)
from skillswap.schemas.swap_request import SwapRequestOut
from skillswap.services.profile_service import get_user_or_404
from skillswap.services.skill_service import get_skill_or_404, stage_skill_deletion

logger = structlog.get_logger("skillswap.moderation_service")

RECENT_LIMIT = 10


def _count(session: Session, model: Any, conditions: list[Any]) -> int:
    statement = select(func.count()).select_from(model).where(*conditions)
    return int(session.exec(statement).one())


def record_action(
    session: Session,
    admin: User,
    action: str,
    *,
    target_type: str | None = None,
    target_id: int | None = None,
    details: str | None = None,
    ip_address: str | None = None,
) -> AdminLog:
    """Stage an audit row; the caller's commit persists it with the change."""
    if admin.id is None:
        raise ValidationError("Admin account missing identifier")
    entry = AdminLog(
        admin_id=admin.id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details,
        ip_address=ip_address,
    )
    session.add(entry)
    logger.info(
        "admin_action",
        admin_id=admin.id,
        action=action,
        target_type=target_type,
        target_id=target_id,
    )
    return entry


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def list_users(
    session: Session,
    *,
    search: str | None,
    role: UserRole | None,
    status_filter: UserStatusFilter,
    limit: int,
    offset: int,
) -> tuple[int, list[User]]:
    conditions: list[Any] = []
    term = (search or "").strip().lower()
    if term:
        conditions.append(
            or_(
                func.lower(col(User.name)).contains(term, autoescape=True),
                func.lower(col(User.email)).contains(term, autoescape=True),
            )
        )
    if role is not None:
        conditions.append(User.role == role)
    if status_filter == UserStatusFilter.active:
        conditions.append(col(User.is_active).is_(True))
        conditions.append(col(User.banned_at).is_(None))
    elif status_filter == UserStatusFilter.banned:
        conditions.append(col(User.banned_at).is_not(None))
    elif status_filter == UserStatusFilter.inactive:
        conditions.append(col(User.is_active).is_(False))

    total_count = _count(session, User, conditions)
    users = list(
        session.exec(
            select(User)
            .where(*conditions)
            .order_by(col(User.created_at).desc(), col(User.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total_count, users


def get_user_detail(session: Session, user_id: int) -> AdminUserDetail:
    user = get_user_or_404(session, user_id)
    detail = AdminUserDetail.model_validate(user, from_attributes=True)

    detail.skills = [
        SkillDetail.model_validate(skill)
        for skill in session.exec(
            select(Skill).where(Skill.user_id == user_id).order_by(col(Skill.id))
        ).all()
    ]

    def recent_requests(condition: Any) -> list[SwapRequestOut]:
        rows = session.exec(
            select(SwapRequest)
            .where(condition)
            .order_by(col(SwapRequest.created_at).desc())
            .limit(RECENT_LIMIT)
        ).all()
        return [SwapRequestOut.model_validate(row, from_attributes=True) for row in rows]

    def recent_reports(condition: Any) -> list[ReportOut]:
        rows = session.exec(
            select(Report)
            .where(condition)
            .order_by(col(Report.created_at).desc())
            .limit(RECENT_LIMIT)
        ).all()
        return [ReportOut.model_validate(row) for row in rows]

    detail.sent_requests = recent_requests(SwapRequest.sender_id == user_id)
    detail.received_requests = recent_requests(SwapRequest.receiver_id == user_id)
    detail.reports_filed = recent_reports(Report.reporter_id == user_id)
    detail.reports_against = recent_reports(Report.reported_user_id == user_id)
    return detail


def ban_user(
    session: Session,
    admin: User,
    user_id: int,
    *,
    reason: str,
    duration: BanDuration,
    ip_address: str | None = None,
) -> User:
    if admin.id == user_id:
        raise ValidationError("You cannot ban yourself")
    user = get_user_or_404(session, user_id)
    if user.role in ADMIN_ROLES and admin.role != UserRole.SUPER_ADMIN:
        raise AuthorizationError("Only a super admin can ban another admin")

    now = datetime.utcnow()
    days = BAN_DAYS.get(duration)
    user.banned_at = now
    user.banned_until = now + timedelta(days=days) if days else None
    user.banned_reason = reason
    user.is_active = False
    user.updated_at = now
    session.add(user)
    record_action(
        session,
        admin,
        "BAN_USER",
        target_type="user",
        target_id=user_id,
        details=f"{duration.value}: {reason}",
        ip_address=ip_address,
    )
    session.commit()
    session.refresh(user)
    return user


def unban_user(
    session: Session,
    admin: User,
    user_id: int,
    *,
    ip_address: str | None = None,
) -> User:
    user = get_user_or_404(session, user_id)
    user.banned_at = None
    user.banned_until = None
    user.banned_reason = None
    user.is_active = True
    user.updated_at = datetime.utcnow()
    session.add(user)
    record_action(
        session,
        admin,
        "UNBAN_USER",
        target_type="user",
        target_id=user_id,
        ip_address=ip_address,
    )
    session.commit()
    session.refresh(user)
    return user


def update_role(
    session: Session,
    admin: User,
    user_id: int,
    role: UserRole,
    *,
    ip_address: str | None = None,
) -> User:
    if admin.id == user_id:
        raise ValidationError("You cannot change your own role")
    user = get_user_or_404(session, user_id)
    user.role = role
    user.updated_at = datetime.utcnow()
    session.add(user)
    record_action(
        session,
        admin,
        "UPDATE_USER_ROLE",
        target_type="user",
        target_id=user_id,
        details=role.value,
        ip_address=ip_address,
    )
    session.commit()
    session.refresh(user)
    return user


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def list_flagged_skills(
    session: Session,
    *,
    limit: int,
    offset: int,
) -> tuple[int, list[Skill]]:
    conditions: list[Any] = [col(Skill.is_flagged).is_(True)]
    total_count = _count(session, Skill, conditions)
    skills = list(
        session.exec(
            select(Skill)
            .where(*conditions)
            .order_by(col(Skill.updated_at).desc(), col(Skill.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total_count, skills


def flag_skill(
    session: Session,
    admin: User,
    skill_id: int,
    *,
    reason: str | None,
    ip_address: str | None = None,
) -> Skill:
    skill = get_skill_or_404(session, skill_id)
    skill.is_flagged = True
    skill.flag_reason = reason
    skill.is_approved = False
    skill.updated_at = datetime.utcnow()
    session.add(skill)
    record_action(
        session,
        admin,
        "FLAG_SKILL",
        target_type="skill",
        target_id=skill_id,
        details=reason,
        ip_address=ip_address,
    )
    session.commit()
    session.refresh(skill)
    return skill


def approve_skill(
    session: Session,
    admin: User,
    skill_id: int,
    *,
    ip_address: str | None = None,
) -> Skill:
    skill = get_skill_or_404(session, skill_id)
    skill.is_flagged = False
    skill.flag_reason = None
    skill.is_approved = True
    skill.updated_at = datetime.utcnow()
    session.add(skill)
    record_action(
        session,
        admin,
        "APPROVE_SKILL",
        target_type="skill",
        target_id=skill_id,
        ip_address=ip_address,
    )
    session.commit()
    session.refresh(skill)
    return skill


def delete_skill(
    session: Session,
    admin: User,
    skill_id: int,
    *,
    ip_address: str | None = None,
) -> None:
    skill = get_skill_or_404(session, skill_id)
    skill_name = skill.name
    stage_skill_deletion(session, skill)
    record_action(
        session,
        admin,
        "DELETE_SKILL",
        target_type="skill",
        target_id=skill_id,
        details=skill_name,
        ip_address=ip_address,
    )
    session.commit()


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def create_report(session: Session, reporter_id: int, payload: ReportCreate) -> Report:
    reported_user_id = payload.reported_user_id
    reported_skill_id = payload.reported_skill_id

    if payload.type == ReportType.SKILL:
        if reported_skill_id is None:
            raise ValidationError("reported_skill_id is required for SKILL reports")
        skill = get_skill_or_404(session, reported_skill_id)
        reported_user_id = skill.user_id
    else:
        if reported_user_id is None:
            raise ValidationError("reported_user_id is required for USER reports")
        get_user_or_404(session, reported_user_id)
        reported_skill_id = None

    if reported_user_id == reporter_id:
        raise ValidationError("You cannot report yourself")

    report = Report(
        reporter_id=reporter_id,
        type=payload.type,
        reported_user_id=reported_user_id,
        reported_skill_id=reported_skill_id,
        reason=payload.reason,
        description=payload.description,
    )
    session.add(report)
    session.commit()
    session.refresh(report)
    logger.info(
        "report_created",
        report_id=report.id,
        reporter_id=reporter_id,
        type=payload.type.value,
    )
    return report


def list_reports(
    session: Session,
    *,
    status: ReportStatus | None,
    report_type: ReportType | None,
    limit: int,
    offset: int,
) -> tuple[int, list[Report]]:
    conditions: list[Any] = []
    if status is not None:
        conditions.append(Report.status == status)
    if report_type is not None:
        conditions.append(Report.type == report_type)

    total_count = _count(session, Report, conditions)
    reports = list(
        session.exec(
            select(Report)
            .where(*conditions)
            .order_by(col(Report.created_at).desc(), col(Report.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total_count, reports


def review_report(
    session: Session,
    admin: User,
    report_id: int,
    *,
    status: ReportStatus,
    resolution: str | None,
    ip_address: str | None = None,
) -> Report:
    report = session.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found")
    report.status = status
    report.resolution = resolution
    report.reviewed_by = admin.id
    report.reviewed_at = datetime.utcnow()
    session.add(report)
    record_action(
        session,
        admin,
        "UPDATE_REPORT",
        target_type="report",
        target_id=report_id,
        details=status.value,
        ip_address=ip_address,
    )
    session.commit()
    session.refresh(report)
    return report


# ---------------------------------------------------------------------------
# Monitoring
# ---------------------------------------------------------------------------


def list_swap_requests(
    session: Session,
    *,
    status: SwapStatus | None,
    limit: int,
    offset: int,
) -> tuple[int, list[SwapRequest]]:
    conditions: list[Any] = []
    if status is not None:
        conditions.append(SwapRequest.status == status)

    total_count = _count(session, SwapRequest, conditions)
    requests = list(
        session.exec(
            select(SwapRequest)
            .where(*conditions)
            .order_by(col(SwapRequest.created_at).desc(), col(SwapRequest.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total_count, requests


def list_admin_logs(
    session: Session,
    *,
    admin_id: int | None,
    action: str | None,
    limit: int,
    offset: int,
) -> tuple[int, list[AdminLog]]:
    conditions: list[Any] = []
    if admin_id is not None:
        conditions.append(AdminLog.admin_id == admin_id)
    term = (action or "").strip().lower()
    if term:
        conditions.append(
            func.lower(col(AdminLog.action)).contains(term, autoescape=True)
        )

    total_count = _count(session, AdminLog, conditions)
    logs = list(
        session.exec(
            select(AdminLog)
            .where(*conditions)
            .order_by(col(AdminLog.created_at).desc(), col(AdminLog.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total_count, logs
