from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from skillswap.models.skill import SkillOut
from skillswap.models.user import UserRole


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    location: str | None = None
    profile_photo: str | None = None
    availability: str | None = None
    is_public: bool | None = None


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: str
    location: str | None = None
    availability: str | None = None
    profile_photo: str | None = None
    is_public: bool
    role: UserRole
    created_at: datetime
    updated_at: datetime
    skills: list[SkillOut] = Field(default_factory=list)


class UserSummary(BaseModel):
    """Public slice of a user embedded in requests, ratings and search results."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: str | None = None
    availability: str | None = None
    profile_photo: str | None = None
    created_at: datetime
    skills: list[SkillOut] = Field(default_factory=list)
