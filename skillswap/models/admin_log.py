from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel


class AdminLog(SQLModel, table=True):
    __tablename__ = "admin_log"

    id: int | None = Field(default=None, primary_key=True)
    admin_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    action: str = Field(nullable=False, index=True)
    target_type: str | None = None
    target_id: int | None = None
    details: str | None = None
    ip_address: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)


class AdminLogOut(SQLModel):
    id: int
    admin_id: int
    action: str
    target_type: str | None = None
    target_id: int | None = None
    details: str | None = None
    ip_address: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
