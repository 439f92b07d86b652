from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine, select

from skillswap.core.errors import ConflictError, StateError, ValidationError
from skillswap.models.admin_log import AdminLog  # noqa: F401
from skillswap.models.rating import Rating
from skillswap.models.report import ReportType
from skillswap.models.skill import Skill  # noqa: F401
from skillswap.models.swap_request import SwapRequest, SwapStatus, sorted_pair
from skillswap.models.user import User
from skillswap.schemas.admin import ReportCreate
from skillswap.services import rating_service, request_service
from skillswap.services.moderation_service import create_report


@pytest.fixture()
def engine(tmp_path: Path) -> Iterator[Engine]:
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'storage.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


def _users(engine: Engine, count: int) -> list[int]:
    with Session(engine) as session:
        users = [
            User(email=f"user{i}@example.com", password_hash="x", name=f"User {i}")
            for i in range(count)
        ]
        session.add_all(users)
        session.commit()
        return [int(user.id or 0) for user in users]


def _swap(sender_id: int, receiver_id: int, status: SwapStatus) -> SwapRequest:
    low, high = sorted_pair(sender_id, receiver_id)
    return SwapRequest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        pair_low_id=low,
        pair_high_id=high,
        status=status,
    )


def _insert(engine: Engine, row: SwapRequest | Rating) -> int:
    with Session(engine) as session:
        session.add(row)
        session.commit()
        return int(row.id or 0)


def test_pending_pair_index_allows_one_pending_row(engine: Engine) -> None:
    alice, bob = _users(engine, 2)
    _insert(engine, _swap(alice, bob, SwapStatus.PENDING))

    with Session(engine) as session:
        session.add(_swap(bob, alice, SwapStatus.PENDING))
        with pytest.raises(IntegrityError):
            session.commit()

    # resolved requests for the same pair are not constrained
    _insert(engine, _swap(alice, bob, SwapStatus.ACCEPTED))
    _insert(engine, _swap(bob, alice, SwapStatus.ACCEPTED))


def test_rating_unique_per_swap_and_rater(engine: Engine) -> None:
    alice, bob = _users(engine, 2)
    swap_id = _insert(engine, _swap(alice, bob, SwapStatus.ACCEPTED))
    _insert(
        engine,
        Rating(swap_request_id=swap_id, rater_id=alice, rated_user_id=bob, rating=5),
    )

    with Session(engine) as session:
        session.add(
            Rating(swap_request_id=swap_id, rater_id=alice, rated_user_id=bob, rating=2)
        )
        with pytest.raises(IntegrityError):
            session.commit()


def test_create_request_turns_index_violation_into_conflict(
    engine: Engine,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    alice, bob = _users(engine, 2)
    _insert(engine, _swap(alice, bob, SwapStatus.PENDING))
    # simulate a concurrent create that slipped past the existence check
    monkeypatch.setattr(request_service, "_pending_between", lambda *args: False)

    with Session(engine) as session:
        with pytest.raises(ConflictError):
            request_service.create_request(session, bob, alice)

    with Session(engine) as session:
        pending = session.exec(
            select(SwapRequest).where(SwapRequest.status == SwapStatus.PENDING)
        ).all()
        assert len(pending) == 1


def test_submit_rating_turns_unique_violation_into_conflict(
    engine: Engine,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    alice, bob = _users(engine, 2)
    swap_id = _insert(engine, _swap(alice, bob, SwapStatus.ACCEPTED))
    _insert(
        engine,
        Rating(swap_request_id=swap_id, rater_id=alice, rated_user_id=bob, rating=5),
    )
    monkeypatch.setattr(rating_service, "_has_rated", lambda *args: False)

    with Session(engine) as session:
        with pytest.raises(ConflictError):
            rating_service.submit_rating(
                session,
                swap_request_id=swap_id,
                rater_id=alice,
                rated_user_id=bob,
                value=1,
            )


def test_respond_fails_when_request_moved_underneath(engine: Engine) -> None:
    alice, bob = _users(engine, 2)
    request_id = _insert(engine, _swap(alice, bob, SwapStatus.PENDING))

    with Session(engine) as stale:
        loaded = stale.get(SwapRequest, request_id)
        assert loaded is not None and loaded.status == SwapStatus.PENDING

        with Session(engine) as other:
            request_service.cancel_request(other, request_id, alice)

        # the stale copy still says PENDING; the conditional update must refuse
        with pytest.raises(StateError):
            request_service.respond_to_request(
                stale,
                request_id,
                bob,
                SwapStatus.ACCEPTED,
            )

    with Session(engine) as session:
        stored = session.get(SwapRequest, request_id)
        assert stored is not None
        assert stored.status == SwapStatus.CANCELLED


def test_delete_fails_when_request_already_removed(engine: Engine) -> None:
    alice, bob = _users(engine, 2)
    request_id = _insert(engine, _swap(alice, bob, SwapStatus.REJECTED))

    with Session(engine) as stale:
        assert stale.get(SwapRequest, request_id) is not None

        with Session(engine) as other:
            request_service.delete_request(other, request_id, bob)

        with pytest.raises(StateError):
            request_service.delete_request(stale, request_id, alice)


def test_create_report_without_target_is_rejected(engine: Engine) -> None:
    (reporter,) = _users(engine, 1)
    payload = ReportCreate.model_construct(
        type=ReportType.SKILL,
        reported_user_id=None,
        reported_skill_id=None,
        reason="spam",
        description=None,
    )

    with Session(engine) as session:
        with pytest.raises(ValidationError):
            create_report(session, reporter, payload)
