from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.types import Enum as SAEnum
from sqlmodel import Field, SQLModel


class SkillType(str, Enum):
    OFFERED = "OFFERED"
    WANTED = "WANTED"


class Skill(SQLModel, table=True):
    __tablename__ = "skill"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    name: str = Field(nullable=False, index=True)
    type: SkillType = Field(
        sa_column=Column(SAEnum(SkillType, name="skilltype"), nullable=False),
    )
    is_flagged: bool = Field(default=False, nullable=False)
    flag_reason: str | None = None
    is_approved: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)


class SkillOut(SQLModel):
    id: int
    name: str
    type: SkillType

    model_config = {"from_attributes": True}


class SkillDetail(SkillOut):
    user_id: int
    is_flagged: bool
    flag_reason: str | None = None
    is_approved: bool
    created_at: datetime
    updated_at: datetime
