from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from skillswap.models.admin_log import AdminLogOut
from skillswap.models.report import ReportOut, ReportStatus, ReportType
from skillswap.models.skill import SkillDetail
from skillswap.models.user import UserRole
from skillswap.schemas.common import Pagination
from skillswap.schemas.swap_request import SwapRequestOut


class BanDuration(str, Enum):
    permanent = "permanent"
    days_7 = "7d"
    days_30 = "30d"
    days_90 = "90d"


BAN_DAYS: dict[BanDuration, int] = {
    BanDuration.days_7: 7,
    BanDuration.days_30: 30,
    BanDuration.days_90: 90,
}


class UserStatusFilter(str, Enum):
    all = "all"
    active = "active"
    banned = "banned"
    inactive = "inactive"


class BanRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=500)
    duration: BanDuration = BanDuration.permanent


class RoleUpdate(BaseModel):
    role: UserRole


class SkillFlagRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class ReportCreate(BaseModel):
    type: ReportType
    reported_user_id: int | None = None
    reported_skill_id: int | None = None
    reason: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _target_matches_type(self) -> "ReportCreate":
        if self.type == ReportType.USER and self.reported_user_id is None:
            raise ValueError("reported_user_id is required for USER reports")
        if self.type == ReportType.SKILL and self.reported_skill_id is None:
            raise ValueError("reported_skill_id is required for SKILL reports")
        return self


class ReportAction(BaseModel):
    status: ReportStatus
    resolution: str | None = Field(default=None, max_length=2000)


class AdminUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: str
    role: UserRole
    is_public: bool
    is_active: bool
    banned_at: datetime | None = None
    banned_until: datetime | None = None
    banned_reason: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime


class AdminUserPage(BaseModel):
    users: list[AdminUserOut]
    pagination: Pagination


class AdminUserDetail(AdminUserOut):
    skills: list[SkillDetail] = Field(default_factory=list)
    sent_requests: list[SwapRequestOut] = Field(default_factory=list)
    received_requests: list[SwapRequestOut] = Field(default_factory=list)
    reports_filed: list[ReportOut] = Field(default_factory=list)
    reports_against: list[ReportOut] = Field(default_factory=list)


class FlaggedSkillPage(BaseModel):
    skills: list[SkillDetail]
    pagination: Pagination


class ReportPage(BaseModel):
    reports: list[ReportOut]
    pagination: Pagination


class AdminSwapRequestPage(BaseModel):
    requests: list[SwapRequestOut]
    pagination: Pagination


class AdminLogPage(BaseModel):
    logs: list[AdminLogOut]
    pagination: Pagination
