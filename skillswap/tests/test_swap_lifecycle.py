from __future__ import annotations

import pytest

from skillswap.core.errors import AuthorizationError, StateError
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.services.swap_lifecycle import (
    TRANSITIONS,
    SwapAction,
    authorize,
    available_actions,
)

SENDER = 1
RECEIVER = 2
OUTSIDER = 3


def _request(status: SwapStatus) -> SwapRequest:
    return SwapRequest(
        id=10,
        sender_id=SENDER,
        receiver_id=RECEIVER,
        pair_low_id=SENDER,
        pair_high_id=RECEIVER,
        status=status,
    )


@pytest.mark.parametrize("action", [SwapAction.ACCEPT, SwapAction.REJECT])
def test_only_receiver_can_respond_to_pending(action: SwapAction) -> None:
    request = _request(SwapStatus.PENDING)

    transition = authorize(request, RECEIVER, action)
    assert transition.target in {SwapStatus.ACCEPTED, SwapStatus.REJECTED}

    for user_id in (SENDER, OUTSIDER):
        with pytest.raises(AuthorizationError):
            authorize(request, user_id, action)


@pytest.mark.parametrize(
    "status",
    [SwapStatus.ACCEPTED, SwapStatus.REJECTED, SwapStatus.CANCELLED],
)
def test_respond_fails_outside_pending(status: SwapStatus) -> None:
    request = _request(status)
    with pytest.raises(StateError):
        authorize(request, RECEIVER, SwapAction.ACCEPT)
    with pytest.raises(StateError):
        authorize(request, RECEIVER, SwapAction.REJECT)


def test_cancel_is_sender_only_and_pending_only() -> None:
    pending = _request(SwapStatus.PENDING)
    assert authorize(pending, SENDER, SwapAction.CANCEL).target == SwapStatus.CANCELLED
    with pytest.raises(AuthorizationError):
        authorize(pending, RECEIVER, SwapAction.CANCEL)
    with pytest.raises(StateError):
        authorize(_request(SwapStatus.ACCEPTED), SENDER, SwapAction.CANCEL)


def test_delete_requires_terminal_negative_state() -> None:
    for status in (SwapStatus.CANCELLED, SwapStatus.REJECTED):
        for user_id in (SENDER, RECEIVER):
            assert authorize(_request(status), user_id, SwapAction.DELETE).target is None

    for status in (SwapStatus.PENDING, SwapStatus.ACCEPTED):
        with pytest.raises(StateError):
            authorize(_request(status), SENDER, SwapAction.DELETE)

    with pytest.raises(AuthorizationError):
        authorize(_request(SwapStatus.REJECTED), OUTSIDER, SwapAction.DELETE)


def test_actor_is_checked_before_state() -> None:
    with pytest.raises(AuthorizationError):
        authorize(_request(SwapStatus.ACCEPTED), SENDER, SwapAction.ACCEPT)


def test_available_actions_follow_table() -> None:
    pending = _request(SwapStatus.PENDING)
    assert available_actions(pending, RECEIVER) == {
        "can_accept": True,
        "can_reject": True,
        "can_cancel": False,
        "can_delete": False,
    }
    assert available_actions(pending, SENDER) == {
        "can_accept": False,
        "can_reject": False,
        "can_cancel": True,
        "can_delete": False,
    }
    rejected = _request(SwapStatus.REJECTED)
    assert available_actions(rejected, SENDER)["can_delete"] is True
    assert available_actions(rejected, OUTSIDER) == {
        "can_accept": False,
        "can_reject": False,
        "can_cancel": False,
        "can_delete": False,
    }


def test_every_action_has_a_transition() -> None:
    assert set(TRANSITIONS) == set(SwapAction)
