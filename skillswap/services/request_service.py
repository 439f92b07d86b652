from __future__ import annotations

from datetime import datetime
from typing import Any, cast

import structlog
from sqlalchemy import delete, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.schema import Table
from sqlmodel import Session, col, select

from skillswap.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PolicyError,
    StateError,
    ValidationError,
)
from skillswap.models.rating import Rating
from skillswap.models.swap_request import SwapRequest, SwapStatus, sorted_pair
from skillswap.models.user import User
from skillswap.schemas.profile import UserSummary
from skillswap.schemas.swap_request import (
    RequestListType,
    StatusCounts,
    SwapRequestDetail,
    SwapRequestStats,
)
from skillswap.services.profile_service import user_summaries
from skillswap.services.swap_lifecycle import (
    DECISION_ACTIONS,
    SwapAction,
    Transition,
    authorize,
    available_actions,
)

logger = structlog.get_logger("skillswap.request_service")

SWAP_TABLE = cast(Table, SwapRequest.__table__)  # type: ignore[attr-defined]
RATING_TABLE = cast(Table, Rating.__table__)  # type: ignore[attr-defined]

DUPLICATE_PENDING_DETAIL = (
    "There is already a pending swap request between you and this user"
)


def _pending_between(session: Session, a_user_id: int, b_user_id: int) -> bool:
    low, high = sorted_pair(a_user_id, b_user_id)
    existing = session.exec(
        select(SwapRequest.id).where(
            SwapRequest.pair_low_id == low,
            SwapRequest.pair_high_id == high,
            SwapRequest.status == SwapStatus.PENDING,
        )
    ).first()
    return existing is not None


def get_request_or_404(session: Session, request_id: int) -> SwapRequest:
    request = session.get(SwapRequest, request_id)
    if request is None:
        raise NotFoundError("Swap request not found")
    return request


def create_request(
    session: Session,
    sender_id: int,
    receiver_id: int,
    message: str | None = None,
) -> SwapRequest:
    if sender_id == receiver_id:
        raise ValidationError("Cannot send swap request to yourself")

    receiver = session.get(User, receiver_id)
    if receiver is None:
        raise NotFoundError("User not found")
    if not receiver.is_public:
        raise PolicyError("Cannot send request to private profile")

    # Both directions block: the pair is unordered
    if _pending_between(session, sender_id, receiver_id):
        raise ConflictError(DUPLICATE_PENDING_DETAIL)

    low, high = sorted_pair(sender_id, receiver_id)
    request = SwapRequest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        pair_low_id=low,
        pair_high_id=high,
        status=SwapStatus.PENDING,
        message=(message or "").strip() or None,
    )
    session.add(request)
    try:
        session.commit()
    except IntegrityError as err:
        # A concurrent create won the partial unique index
        session.rollback()
        raise ConflictError(DUPLICATE_PENDING_DETAIL) from err
    session.refresh(request)

    logger.info(
        "swap_request_created",
        request_id=request.id,
        sender_id=sender_id,
        receiver_id=receiver_id,
    )
    return request


def _apply_transition(
    session: Session,
    request: SwapRequest,
    transition: Transition,
) -> SwapRequest:
    """Write the new status only if nobody moved the request in the meantime."""
    statement: Any = (
        update(SWAP_TABLE)
        .where(
            SWAP_TABLE.c.id == request.id,
            SWAP_TABLE.c.status.in_(list(transition.allowed_from)),
        )
        .values(status=transition.target, updated_at=datetime.utcnow())
    )
    result: Any = session.exec(statement)
    if result.rowcount == 0:
        session.rollback()
        raise StateError(transition.state_detail)
    session.commit()
    session.refresh(request)
    return request


def respond_to_request(
    session: Session,
    request_id: int,
    responder_id: int,
    decision: SwapStatus,
) -> SwapRequest:
    action = DECISION_ACTIONS.get(decision)
    if action is None:
        raise ValidationError("Decision must be ACCEPTED or REJECTED")

    request = get_request_or_404(session, request_id)
    transition = authorize(request, responder_id, action)
    request = _apply_transition(session, request, transition)

    logger.info(
        "swap_request_responded",
        request_id=request_id,
        responder_id=responder_id,
        status=request.status.value,
    )
    return request


def cancel_request(
    session: Session,
    request_id: int,
    requester_id: int,
) -> SwapRequest:
    request = get_request_or_404(session, request_id)
    transition = authorize(request, requester_id, SwapAction.CANCEL)
    request = _apply_transition(session, request, transition)

    logger.info(
        "swap_request_cancelled",
        request_id=request_id,
        requester_id=requester_id,
    )
    return request


def delete_request(session: Session, request_id: int, actor_id: int) -> None:
    request = session.get(SwapRequest, request_id)
    if request is None:
        # Repeated deletes land here
        raise StateError("Swap request has already been deleted")

    transition = authorize(request, actor_id, SwapAction.DELETE)

    ratings_statement: Any = delete(RATING_TABLE).where(
        RATING_TABLE.c.swap_request_id == request_id
    )
    session.exec(ratings_statement)
    request_statement: Any = delete(SWAP_TABLE).where(
        SWAP_TABLE.c.id == request_id,
        SWAP_TABLE.c.status.in_(list(transition.allowed_from)),
    )
    result: Any = session.exec(request_statement)
    if result.rowcount == 0:
        session.rollback()
        raise StateError(transition.state_detail)
    session.commit()
    session.expunge(request)

    logger.info("swap_request_deleted", request_id=request_id, actor_id=actor_id)


def get_request_for_participant(
    session: Session,
    request_id: int,
    user_id: int,
) -> SwapRequest:
    request = get_request_or_404(session, request_id)
    if not request.is_participant(user_id):
        raise AuthorizationError("Unauthorized to view this request")
    return request


def list_requests_for_user(
    session: Session,
    user_id: int,
    *,
    list_type: RequestListType,
    status: SwapStatus | None,
    limit: int,
    offset: int,
) -> tuple[int, list[SwapRequest]]:
    if list_type == RequestListType.sent:
        conditions: list[Any] = [SwapRequest.sender_id == user_id]
    elif list_type == RequestListType.received:
        conditions = [SwapRequest.receiver_id == user_id]
    else:
        conditions = [
            or_(
                SwapRequest.sender_id == user_id,
                SwapRequest.receiver_id == user_id,
            )
        ]
    if status is not None:
        conditions.append(SwapRequest.status == status)

    count_statement = (
        select(func.count()).select_from(SWAP_TABLE).where(*conditions)
    )
    total_count = int(session.exec(count_statement).one())

    statement = (
        select(SwapRequest)
        .where(*conditions)
        .order_by(col(SwapRequest.created_at).desc(), col(SwapRequest.id).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(session.exec(statement).all())
    return total_count, requests


def describe_requests(
    session: Session,
    requests: list[SwapRequest],
    viewer_id: int,
) -> list[SwapRequestDetail]:
    """Attach participant summaries and the viewer's allowed actions."""
    summaries: dict[int, UserSummary] = user_summaries(
        session,
        [user_id for request in requests for user_id in request.participant_ids],
    )
    details: list[SwapRequestDetail] = []
    for request in requests:
        detail = SwapRequestDetail.model_validate(request, from_attributes=True)
        detail.sender = summaries.get(request.sender_id)
        detail.receiver = summaries.get(request.receiver_id)
        detail.is_sender = request.sender_id == viewer_id
        detail.is_receiver = request.receiver_id == viewer_id
        for flag, allowed in available_actions(request, viewer_id).items():
            setattr(detail, flag, allowed)
        details.append(detail)
    return details


def _status_counts(session: Session, condition: Any) -> StatusCounts:
    statement: Any = (
        select(SWAP_TABLE.c.status, func.count())
        .where(condition)
        .group_by(SWAP_TABLE.c.status)
    )
    counts = {status.value: 0 for status in SwapStatus}
    for status_value, total in session.exec(statement):
        key = (
            status_value.value
            if isinstance(status_value, SwapStatus)
            else str(status_value)
        )
        counts[key] = int(total)
    return StatusCounts(**counts)


def count_by_status(session: Session, user_id: int) -> SwapRequestStats:
    return SwapRequestStats(
        sent=_status_counts(session, SWAP_TABLE.c.sender_id == user_id),
        received=_status_counts(session, SWAP_TABLE.c.receiver_id == user_id),
    )
