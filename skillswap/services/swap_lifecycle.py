"""Swap request state machine.

Every guard on a swap request (who may act, and from which state) lives in
``TRANSITIONS``. Mutating endpoints call :func:`authorize` before writing,
and the per-request ``can_*`` flags shown to clients come from
:func:`available_actions`, so the two can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from skillswap.core.errors import AuthorizationError, StateError
from skillswap.models.swap_request import SwapRequest, SwapStatus


class SwapAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"
    DELETE = "delete"


class ActorRole(str, Enum):
    SENDER = "sender"
    RECEIVER = "receiver"
    PARTICIPANT = "participant"


@dataclass(frozen=True)
class Transition:
    actor: ActorRole
    allowed_from: frozenset[SwapStatus]
    # None means the request is removed rather than moved to a new state
    target: SwapStatus | None
    forbidden_detail: str
    state_detail: str


TRANSITIONS: dict[SwapAction, Transition] = {
    SwapAction.ACCEPT: Transition(
        actor=ActorRole.RECEIVER,
        allowed_from=frozenset({SwapStatus.PENDING}),
        target=SwapStatus.ACCEPTED,
        forbidden_detail="Only the receiver can respond to this request",
        state_detail="This request has already been responded to",
    ),
    SwapAction.REJECT: Transition(
        actor=ActorRole.RECEIVER,
        allowed_from=frozenset({SwapStatus.PENDING}),
        target=SwapStatus.REJECTED,
        forbidden_detail="Only the receiver can respond to this request",
        state_detail="This request has already been responded to",
    ),
    SwapAction.CANCEL: Transition(
        actor=ActorRole.SENDER,
        allowed_from=frozenset({SwapStatus.PENDING}),
        target=SwapStatus.CANCELLED,
        forbidden_detail="Only the sender can cancel this request",
        state_detail="Only pending requests can be cancelled",
    ),
    SwapAction.DELETE: Transition(
        actor=ActorRole.PARTICIPANT,
        allowed_from=frozenset({SwapStatus.CANCELLED, SwapStatus.REJECTED}),
        target=None,
        forbidden_detail="Unauthorized to delete this request",
        state_detail="Only cancelled or rejected requests can be deleted",
    ),
}

DECISION_ACTIONS: dict[SwapStatus, SwapAction] = {
    SwapStatus.ACCEPTED: SwapAction.ACCEPT,
    SwapStatus.REJECTED: SwapAction.REJECT,
}


def _plays_role(request: SwapRequest, user_id: int, role: ActorRole) -> bool:
    if role == ActorRole.SENDER:
        return request.sender_id == user_id
    if role == ActorRole.RECEIVER:
        return request.receiver_id == user_id
    return request.is_participant(user_id)


def authorize(request: SwapRequest, user_id: int, action: SwapAction) -> Transition:
    """Return the transition for ``action`` or raise why it is not allowed.

    The actor check runs before the state check.
    """
    transition = TRANSITIONS[action]
    if not _plays_role(request, user_id, transition.actor):
        raise AuthorizationError(transition.forbidden_detail)
    if request.status not in transition.allowed_from:
        raise StateError(transition.state_detail)
    return transition


def is_allowed(request: SwapRequest, user_id: int, action: SwapAction) -> bool:
    transition = TRANSITIONS[action]
    return (
        _plays_role(request, user_id, transition.actor)
        and request.status in transition.allowed_from
    )


def available_actions(request: SwapRequest, user_id: int) -> dict[str, bool]:
    return {
        "can_accept": is_allowed(request, user_id, SwapAction.ACCEPT),
        "can_reject": is_allowed(request, user_id, SwapAction.REJECT),
        "can_cancel": is_allowed(request, user_id, SwapAction.CANCEL),
        "can_delete": is_allowed(request, user_id, SwapAction.DELETE),
    }
