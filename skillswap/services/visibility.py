"""Pairing exclusivity rules for discovery.

An ACCEPTED swap locks its two participants out of each other's search
results until both have rated the other for that swap. These helpers are
pure: callers pass in the swaps and ratings they loaded, so the rules can be
exercised without a database.
"""

from __future__ import annotations

from collections.abc import Iterable

from skillswap.models.rating import Rating
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.models.user import User


def mutual_rating_complete(swap: SwapRequest, ratings: Iterable[Rating]) -> bool:
    rated_pairs = {
        (rating.rater_id, rating.rated_user_id)
        for rating in ratings
        if rating.swap_request_id == swap.id
    }
    return (swap.sender_id, swap.receiver_id) in rated_pairs and (
        swap.receiver_id,
        swap.sender_id,
    ) in rated_pairs


def _between(swap: SwapRequest, a_user_id: int, b_user_id: int) -> bool:
    return {swap.sender_id, swap.receiver_id} == {a_user_id, b_user_id}


def unresolved_accepted_swap(
    viewer_id: int,
    candidate_id: int,
    swaps: Iterable[SwapRequest],
    ratings: Iterable[Rating],
) -> SwapRequest | None:
    """The ACCEPTED swap between the two users still waiting on a rating."""
    rating_rows = list(ratings)
    for swap in swaps:
        if swap.status != SwapStatus.ACCEPTED:
            continue
        if not _between(swap, viewer_id, candidate_id):
            continue
        if not mutual_rating_complete(swap, rating_rows):
            return swap
    return None


def is_visible_to(
    viewer_id: int,
    candidate: User,
    swaps: Iterable[SwapRequest],
    ratings: Iterable[Rating],
) -> bool:
    if candidate.id == viewer_id:
        return False
    if not candidate.is_public:
        return False
    if candidate.id is None:
        return False
    return unresolved_accepted_swap(viewer_id, candidate.id, swaps, ratings) is None


def locked_counterparts(
    viewer_id: int,
    swaps: Iterable[SwapRequest],
    ratings: Iterable[Rating],
) -> set[int]:
    """Users the viewer is currently paired with through an unrated swap."""
    rating_rows = list(ratings)
    locked: set[int] = set()
    for swap in swaps:
        if swap.status != SwapStatus.ACCEPTED or not swap.is_participant(viewer_id):
            continue
        if not mutual_rating_complete(swap, rating_rows):
            locked.add(swap.other_participant(viewer_id))
    return locked
