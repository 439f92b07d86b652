from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from skillswap.models.swap_request import SwapStatus
from skillswap.schemas.common import Pagination
from skillswap.schemas.profile import UserSummary


class SwapDecision(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class RequestListType(str, Enum):
    sent = "sent"
    received = "received"
    all = "all"


class SwapRequestCreate(BaseModel):
    receiver_id: int
    message: str | None = Field(default=None, max_length=2000)


class SwapRequestRespond(BaseModel):
    status: SwapDecision


class SwapRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_id: int
    receiver_id: int
    status: SwapStatus
    message: str | None = None
    created_at: datetime
    updated_at: datetime


class SwapRequestDetail(SwapRequestOut):
    sender: UserSummary | None = None
    receiver: UserSummary | None = None
    is_sender: bool = False
    is_receiver: bool = False
    can_accept: bool = False
    can_reject: bool = False
    can_cancel: bool = False
    can_delete: bool = False


class SwapRequestPage(BaseModel):
    requests: list[SwapRequestDetail]
    pagination: Pagination


class StatusCounts(BaseModel):
    PENDING: int = 0
    ACCEPTED: int = 0
    REJECTED: int = 0
    CANCELLED: int = 0


class SwapRequestStats(BaseModel):
    sent: StatusCounts
    received: StatusCounts
