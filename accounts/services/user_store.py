from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import asc, func
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, select

from accounts.models.user import User
from accounts.services.filters import USER_TABLE


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserStore(Protocol):
    """Relational persistence used by ``UserService``.

    Implementations raise ``sqlalchemy.exc.SQLAlchemyError`` on failure.
    Mutating methods return ``None`` when no row matched the id.
    """

    def find_by_email(self, email: str) -> User | None: ...

    def insert(self, *, name: str, email: str, password: str) -> User: ...

    def page(
        self,
        conditions: Sequence[ColumnElement[bool]],
        *,
        limit: int,
        offset: int,
    ) -> tuple[list[User], int]: ...

    def get(self, user_id: str) -> User | None: ...

    def update(self, user_id: str, *, name: str, email: str) -> User | None: ...

    def delete(self, user_id: str) -> User | None: ...


class SqlUserStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def find_by_email(self, email: str) -> User | None:
        return self.session.exec(select(User).where(User.email == email)).first()

    def insert(self, *, name: str, email: str, password: str) -> User:
        now = _utcnow()
        user = User(
            name=name,
            email=email,
            password=password,
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def page(
        self,
        conditions: Sequence[ColumnElement[bool]],
        *,
        limit: int,
        offset: int,
    ) -> tuple[list[User], int]:
        # Total rides along on every row, so data and count share one round trip
        total_column = func.count().over().label("total_count")
        statement = (
            select(User, total_column)
            .where(*conditions)
            .order_by(asc(USER_TABLE.c.created_at), asc(USER_TABLE.c.id))
            .offset(offset)
            .limit(limit)
        )
        rows = self.session.exec(statement).all()
        if rows:
            return [row[0] for row in rows], int(rows[0][1])
        if offset == 0:
            return [], 0

        # Past the last page no row carries the window count
        total_result = self.session.exec(
            select(func.count(USER_TABLE.c.id)).where(*conditions)
        )
        return [], int(total_result.first() or 0)

    def get(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def update(self, user_id: str, *, name: str, email: str) -> User | None:
        user = self.session.get(User, user_id)
        if user is None:
            return None
        user.name = name
        user.email = email
        user.updated_at = _utcnow()
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def delete(self, user_id: str) -> User | None:
        user = self.session.get(User, user_id)
        if user is None:
            return None
        # Detached copy; the instance itself is expired once the delete commits
        deleted = User(
            id=user.id,
            name=user.name,
            email=user.email,
            password=user.password,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self.session.delete(user)
        self._commit()
        return deleted
