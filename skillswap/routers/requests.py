from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from skillswap.core.config import settings
from skillswap.core.db import get_session
from skillswap.core.errors import ValidationError
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.routers.auth import CurrentUserDep, require_user_id
from skillswap.schemas.common import build_pagination, page_offset
from skillswap.schemas.swap_request import (
    RequestListType,
    SwapRequestCreate,
    SwapRequestDetail,
    SwapRequestPage,
    SwapRequestRespond,
    SwapRequestStats,
)
from skillswap.services.request_service import (
    cancel_request,
    count_by_status,
    create_request,
    delete_request,
    describe_requests,
    get_request_for_participant,
    list_requests_for_user,
    respond_to_request,
)

router = APIRouter(prefix="/requests", tags=["requests"])

SessionDep = Annotated[Session, Depends(get_session)]


def _parse_status(raw: str) -> SwapStatus | None:
    value = raw.strip().upper()
    if not value or value == "ALL":
        return None
    try:
        return SwapStatus(value)
    except ValueError as err:
        raise ValidationError(f"Unknown status filter: {raw}") from err


def _detail(session: Session, request: SwapRequest, viewer_id: int) -> SwapRequestDetail:
    return describe_requests(session, [request], viewer_id)[0]


@router.post(
    "/create",
    response_model=SwapRequestDetail,
    status_code=status.HTTP_201_CREATED,
)
def create(
    payload: SwapRequestCreate,
    current: CurrentUserDep,
    session: SessionDep,
) -> SwapRequestDetail:
    user_id = require_user_id(current)
    request = create_request(session, user_id, payload.receiver_id, payload.message)
    return _detail(session, request, user_id)


@router.get("/my-requests", response_model=SwapRequestPage)
def my_requests(
    current: CurrentUserDep,
    session: SessionDep,
    response: Response,
    type: Annotated[RequestListType, Query()] = RequestListType.all,
    status_filter: Annotated[str, Query(alias="status")] = "all",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> SwapRequestPage:
    user_id = require_user_id(current)
    total_count, requests = list_requests_for_user(
        session,
        user_id,
        list_type=type,
        status=_parse_status(status_filter),
        limit=limit,
        offset=page_offset(page, limit),
    )
    response.headers["X-Total-Count"] = str(total_count)
    return SwapRequestPage(
        requests=describe_requests(session, requests, user_id),
        pagination=build_pagination(page, limit, total_count),
    )


@router.get("/stats/summary", response_model=SwapRequestStats)
def stats_summary(current: CurrentUserDep, session: SessionDep) -> SwapRequestStats:
    return count_by_status(session, require_user_id(current))


@router.get("/{request_id}", response_model=SwapRequestDetail)
def get_request(
    request_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> SwapRequestDetail:
    user_id = require_user_id(current)
    request = get_request_for_participant(session, request_id, user_id)
    return _detail(session, request, user_id)


@router.put("/{request_id}/respond", response_model=SwapRequestDetail)
def respond(
    request_id: int,
    payload: SwapRequestRespond,
    current: CurrentUserDep,
    session: SessionDep,
) -> SwapRequestDetail:
    user_id = require_user_id(current)
    request = respond_to_request(
        session,
        request_id,
        user_id,
        SwapStatus(payload.status.value),
    )
    return _detail(session, request, user_id)


@router.put("/{request_id}/cancel", response_model=SwapRequestDetail)
def cancel(
    request_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> SwapRequestDetail:
    user_id = require_user_id(current)
    request = cancel_request(session, request_id, user_id)
    return _detail(session, request, user_id)


@router.delete("/{request_id}")
def delete(
    request_id: int,
    current: CurrentUserDep,
    session: SessionDep,
) -> dict[str, str]:
    delete_request(session, request_id, require_user_id(current))
    return {"message": "Swap request deleted successfully"}
