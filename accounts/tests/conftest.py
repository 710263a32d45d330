from collections.abc import Iterator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from accounts.models.user import User  # noqa: F401
from accounts.services.user_service import UserService
from accounts.services.user_store import SqlUserStore
from accounts.services.validation import UserCreateValidator


@pytest.fixture
def engine() -> Iterator[Engine]:
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def service(session: Session) -> UserService:
    return UserService(
        store=SqlUserStore(session),
        validator=UserCreateValidator(password_min_length=8),
    )
