from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from sqlmodel import Session, SQLModel, create_engine

from skillswap.core.config import settings


def _connect_args(url: str) -> dict[str, Any]:
    # SQLite connections are shared across FastAPI's threadpool workers
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
)


def init_db() -> None:
    # Register every table on the metadata before creating it
    from skillswap.models import (  # noqa: F401
        admin_log,
        rating,
        report,
        skill,
        swap_request,
        user,
    )

    SQLModel.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
