from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.types import Enum as SAEnum
from sqlmodel import Field, SQLModel


class ReportType(str, Enum):
    USER = "USER"
    SKILL = "SKILL"


class ReportStatus(str, Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class Report(SQLModel, table=True):
    __tablename__ = "report"

    id: int | None = Field(default=None, primary_key=True)
    reporter_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    type: ReportType = Field(
        sa_column=Column(SAEnum(ReportType, name="reporttype"), nullable=False),
    )
    reported_user_id: int | None = Field(
        default=None,
        foreign_key="user.id",
        index=True,
    )
    reported_skill_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("skill.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    reason: str = Field(nullable=False)
    description: str | None = None
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=Column(
            SAEnum(ReportStatus, name="reportstatus"),
            nullable=False,
            server_default=ReportStatus.PENDING.value,
        ),
    )
    resolution: str | None = None
    reviewed_by: int | None = Field(default=None, foreign_key="user.id")
    reviewed_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)


class ReportOut(SQLModel):
    id: int
    reporter_id: int
    type: ReportType
    reported_user_id: int | None = None
    reported_skill_id: int | None = None
    reason: str
    description: str | None = None
    status: ReportStatus
    resolution: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
