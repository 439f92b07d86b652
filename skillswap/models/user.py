from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import Column
from sqlalchemy.types import Enum as SAEnum
from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


class User(SQLModel, table=True):
    __tablename__ = "user"
    __table_args__ = (sa.UniqueConstraint("email", name="uq_user_email"),)

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True)
    password_hash: str
    name: str = Field(nullable=False)
    location: str | None = None
    availability: str | None = None
    profile_photo: str | None = None
    is_public: bool = Field(default=True, nullable=False, index=True)
    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=Column(
            SAEnum(UserRole, name="userrole"),
            nullable=False,
            server_default=UserRole.USER.value,
        ),
    )
    is_active: bool = Field(default=True, nullable=False)
    banned_at: datetime | None = None
    banned_until: datetime | None = None
    banned_reason: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def is_banned(self, now: datetime | None = None) -> bool:
        if self.banned_at is None:
            return False
        if self.banned_until is None:
            return True
        return self.banned_until > (now or datetime.utcnow())

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
