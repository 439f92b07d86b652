from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlmodel import Field, SQLModel


class Rating(SQLModel, table=True):
    __tablename__ = "rating"
    __table_args__ = (
        UniqueConstraint(
            "swap_request_id",
            "rater_id",
            name="uq_rating_swap_rater",
        ),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
    )

    id: int | None = Field(default=None, primary_key=True)
    swap_request_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("swap_request.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    rater_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    rated_user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    rating: int = Field(nullable=False)
    feedback: str | None = None
    is_public: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
