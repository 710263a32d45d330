from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from accounts.core.config import settings


def _connect_args(url: str) -> dict[str, object]:
    # SQLite connections are shared across FastAPI's threadpool
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine: Engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
)


def init_db() -> None:
    # Import so the table is registered on SQLModel.metadata
    from accounts.models import user  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
