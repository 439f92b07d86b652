from __future__ import annotations

from skillswap.models.rating import Rating
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.models.user import User
from skillswap.services.visibility import (
    is_visible_to,
    locked_counterparts,
    mutual_rating_complete,
)

A = 1
B = 2


def _user(user_id: int, *, is_public: bool = True) -> User:
    return User(
        id=user_id,
        email=f"user{user_id}@example.com",
        password_hash="x",
        name=f"User {user_id}",
        is_public=is_public,
    )


def _swap(status: SwapStatus, swap_id: int = 100) -> SwapRequest:
    return SwapRequest(
        id=swap_id,
        sender_id=A,
        receiver_id=B,
        pair_low_id=A,
        pair_high_id=B,
        status=status,
    )


def _rating(rater: int, rated: int, swap_id: int = 100) -> Rating:
    return Rating(swap_request_id=swap_id, rater_id=rater, rated_user_id=rated, rating=5)


def test_viewer_and_private_users_are_hidden() -> None:
    assert not is_visible_to(A, _user(A), [], [])
    assert not is_visible_to(A, _user(B, is_public=False), [], [])
    assert is_visible_to(A, _user(B), [], [])


def test_mutual_rating_flips_visibility() -> None:
    swaps = [_swap(SwapStatus.ACCEPTED)]

    assert not is_visible_to(A, _user(B), swaps, [])
    assert not is_visible_to(B, _user(A), swaps, [])

    one_sided = [_rating(A, B)]
    assert not is_visible_to(A, _user(B), swaps, one_sided)
    assert not is_visible_to(B, _user(A), swaps, one_sided)

    both = [_rating(A, B), _rating(B, A)]
    assert is_visible_to(A, _user(B), swaps, both)
    assert is_visible_to(B, _user(A), swaps, both)


def test_only_accepted_swaps_lock() -> None:
    for status in (SwapStatus.PENDING, SwapStatus.REJECTED, SwapStatus.CANCELLED):
        assert is_visible_to(A, _user(B), [_swap(status)], [])


def test_ratings_from_other_swaps_do_not_count() -> None:
    swap = _swap(SwapStatus.ACCEPTED, swap_id=100)
    ratings = [_rating(A, B, swap_id=99), _rating(B, A, swap_id=99)]
    assert not mutual_rating_complete(swap, ratings)
    assert not is_visible_to(A, _user(B), [swap], ratings)


def test_locked_counterparts() -> None:
    resolved = _swap(SwapStatus.ACCEPTED, swap_id=100)
    open_swap = SwapRequest(
        id=101,
        sender_id=3,
        receiver_id=A,
        pair_low_id=A,
        pair_high_id=3,
        status=SwapStatus.ACCEPTED,
    )
    ratings = [_rating(A, B), _rating(B, A), _rating(3, A, swap_id=101)]

    assert locked_counterparts(A, [resolved, open_swap], ratings) == {3}


def test_resolved_swap_does_not_unlock_a_newer_open_one() -> None:
    swaps = [
        _swap(SwapStatus.ACCEPTED, swap_id=100),
        _swap(SwapStatus.ACCEPTED, swap_id=101),
    ]
    first_rated = [_rating(A, B, 100), _rating(B, A, 100)]

    assert mutual_rating_complete(swaps[0], first_rated)
    assert not is_visible_to(A, _user(B), swaps, first_rated)
    assert not is_visible_to(B, _user(A), swaps, first_rated)
    assert locked_counterparts(A, swaps, first_rated) == {B}

    all_rated = first_rated + [_rating(A, B, 101), _rating(B, A, 101)]
    assert is_visible_to(A, _user(B), swaps, all_rated)
    assert locked_counterparts(A, swaps, all_rated) == set()
