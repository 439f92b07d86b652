from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Index, text
from sqlalchemy.types import Enum as SAEnum
from sqlmodel import Field, SQLModel


class SwapStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


_PENDING_ONLY = text("status = 'PENDING'")


def sorted_pair(a_user_id: int, b_user_id: int) -> tuple[int, int]:
    return (a_user_id, b_user_id) if a_user_id < b_user_id else (b_user_id, a_user_id)


class SwapRequest(SQLModel, table=True):
    __tablename__ = "swap_request"
    __table_args__ = (
        # At most one PENDING request per unordered pair of users
        Index(
            "uq_swap_request_pending_pair",
            "pair_low_id",
            "pair_high_id",
            unique=True,
            sqlite_where=_PENDING_ONLY,
            postgresql_where=_PENDING_ONLY,
        ),
        Index("ix_swap_request_pair_status", "pair_low_id", "pair_high_id", "status"),
    )

    id: int | None = Field(default=None, primary_key=True)
    sender_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    receiver_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    pair_low_id: int = Field(nullable=False)
    pair_high_id: int = Field(nullable=False)
    status: SwapStatus = Field(
        default=SwapStatus.PENDING,
        sa_column=Column(
            SAEnum(SwapStatus, name="swapstatus"),
            nullable=False,
            server_default=SwapStatus.PENDING.value,
        ),
    )
    message: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    @property
    def participant_ids(self) -> tuple[int, int]:
        return self.sender_id, self.receiver_id

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.sender_id, self.receiver_id)

    def other_participant(self, user_id: int) -> int:
        return self.receiver_id if user_id == self.sender_id else self.sender_id
