from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlmodel import Session

from skillswap.core.config import settings
from skillswap.core.db import get_session
from skillswap.models.admin_log import AdminLogOut
from skillswap.models.report import ReportOut, ReportStatus, ReportType
from skillswap.models.skill import SkillDetail
from skillswap.models.swap_request import SwapStatus
from skillswap.models.user import UserRole
from skillswap.routers.auth import AdminDep, SuperAdminDep
from skillswap.schemas.admin import (
    AdminLogPage,
    AdminSwapRequestPage,
    AdminUserDetail,
    AdminUserOut,
    AdminUserPage,
    BanRequest,
    FlaggedSkillPage,
    ReportAction,
    ReportPage,
    RoleUpdate,
    SkillFlagRequest,
    UserStatusFilter,
)
from skillswap.schemas.common import build_pagination, page_offset
from skillswap.schemas.swap_request import SwapRequestOut
from skillswap.services import moderation_service

router = APIRouter(prefix="/admin", tags=["admin"])

SessionDep = Annotated[Session, Depends(get_session)]
PageQuery = Annotated[int, Query(ge=1)]
LimitQuery = Annotated[int, Query(ge=1, le=settings.max_page_size)]


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


# ---- Users ----


@router.get("/users", response_model=AdminUserPage)
def list_users(
    _admin: AdminDep,
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
    search: Annotated[str | None, Query(max_length=120)] = None,
    role: UserRole | None = None,
    status: UserStatusFilter = UserStatusFilter.all,
) -> AdminUserPage:
    total_count, users = moderation_service.list_users(
        session,
        search=search,
        role=role,
        status_filter=status,
        limit=limit,
        offset=page_offset(page, limit),
    )
    return AdminUserPage(
        users=[AdminUserOut.model_validate(user) for user in users],
        pagination=build_pagination(page, limit, total_count),
    )


@router.get("/users/{user_id}", response_model=AdminUserDetail)
def user_detail(user_id: int, _admin: AdminDep, session: SessionDep) -> AdminUserDetail:
    return moderation_service.get_user_detail(session, user_id)


@router.put("/users/{user_id}/ban", response_model=AdminUserOut)
def ban_user(
    user_id: int,
    payload: BanRequest,
    admin: AdminDep,
    session: SessionDep,
    request: Request,
) -> AdminUserOut:
    user = moderation_service.ban_user(
        session,
        admin,
        user_id,
        reason=payload.reason,
        duration=payload.duration,
        ip_address=_client_ip(request),
    )
    return AdminUserOut.model_validate(user)


@router.put("/users/{user_id}/unban", response_model=AdminUserOut)
def unban_user(
    user_id: int,
    admin: AdminDep,
    session: SessionDep,
    request: Request,
) -> AdminUserOut:
    user = moderation_service.unban_user(
        session,
        admin,
        user_id,
        ip_address=_client_ip(request),
    )
    return AdminUserOut.model_validate(user)


@router.put("/users/{user_id}/role", response_model=AdminUserOut)
def update_role(
    user_id: int,
    payload: RoleUpdate,
    admin: SuperAdminDep,
    session: SessionDep,
    request: Request,
) -> AdminUserOut:
    user = moderation_service.update_role(
        session,
        admin,
        user_id,
        payload.role,
        ip_address=_client_ip(request),
    )
    return AdminUserOut.model_validate(user)


# ---- Content ----


@router.get("/content/flagged", response_model=FlaggedSkillPage)
def flagged_content(
    _admin: AdminDep,
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
) -> FlaggedSkillPage:
    total_count, skills = moderation_service.list_flagged_skills(
        session,
        limit=limit,
        offset=page_offset(page, limit),
    )
    return FlaggedSkillPage(
        skills=[SkillDetail.model_validate(skill) for skill in skills],
        pagination=build_pagination(page, limit, total_count),
    )


@router.put("/content/skills/{skill_id}/flag", response_model=SkillDetail)
def flag_skill(
    skill_id: int,
    payload: SkillFlagRequest,
    admin: AdminDep,
    session: SessionDep,
    request: Request,
) -> SkillDetail:
    skill = moderation_service.flag_skill(
        session,
        admin,
        skill_id,
        reason=payload.reason,
        ip_address=_client_ip(request),
    )
    return SkillDetail.model_validate(skill)


@router.put("/content/skills/{skill_id}/approve", response_model=SkillDetail)
def approve_skill(
    skill_id: int,
    admin: AdminDep,
    session: SessionDep,
    request: Request,
) -> SkillDetail:
    skill = moderation_service.approve_skill(
        session,
        admin,
        skill_id,
        ip_address=_client_ip(request),
    )
    return SkillDetail.model_validate(skill)


@router.delete("/content/skills/{skill_id}")
def delete_skill(
    skill_id: int,
    admin: AdminDep,
    session: SessionDep,
    request: Request,
) -> dict[str, str]:
    moderation_service.delete_skill(
        session,
        admin,
        skill_id,
        ip_address=_client_ip(request),
    )
    return {"message": "Skill deleted successfully"}


# ---- Reports ----


@router.get("/reports", response_model=ReportPage)
def list_reports(
    _admin: AdminDep,
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
    status: ReportStatus | None = None,
    type: ReportType | None = None,
) -> ReportPage:
    total_count, reports = moderation_service.list_reports(
        session,
        status=status,
        report_type=type,
        limit=limit,
        offset=page_offset(page, limit),
    )
    return ReportPage(
        reports=[ReportOut.model_validate(report) for report in reports],
        pagination=build_pagination(page, limit, total_count),
    )


@router.put("/reports/{report_id}", response_model=ReportOut)
def review_report(
    report_id: int,
    payload: ReportAction,
    admin: AdminDep,
    session: SessionDep,
    request: Request,
) -> ReportOut:
    report = moderation_service.review_report(
        session,
        admin,
        report_id,
        status=payload.status,
        resolution=payload.resolution,
        ip_address=_client_ip(request),
    )
    return ReportOut.model_validate(report)


# ---- Monitoring ----


@router.get("/swap-requests", response_model=AdminSwapRequestPage)
def list_swap_requests(
    _admin: AdminDep,
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
    status: SwapStatus | None = None,
) -> AdminSwapRequestPage:
    total_count, requests = moderation_service.list_swap_requests(
        session,
        status=status,
        limit=limit,
        offset=page_offset(page, limit),
    )
    return AdminSwapRequestPage(
        requests=[
            SwapRequestOut.model_validate(item, from_attributes=True) for item in requests
        ],
        pagination=build_pagination(page, limit, total_count),
    )


@router.get("/logs", response_model=AdminLogPage)
def list_logs(
    _admin: SuperAdminDep,
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
    admin_id: int | None = None,
    action: Annotated[str | None, Query(max_length=100)] = None,
) -> AdminLogPage:
    total_count, logs = moderation_service.list_admin_logs(
        session,
        admin_id=admin_id,
        action=action,
        limit=limit,
        offset=page_offset(page, limit),
    )
    return AdminLogPage(
        logs=[AdminLogOut.model_validate(entry) for entry in logs],
        pagination=build_pagination(page, limit, total_count),
    )
