from __future__ import annotations

from typing import cast

from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.schema import Table

from accounts.models.user import User

USER_TABLE = cast(Table, User.__table__)  # type: ignore[attr-defined]


def user_filter_conditions(
    *,
    name: str | None = None,
    email: str | None = None,
) -> list[ColumnElement[bool]]:
    """Equality predicates for the filters that were supplied.

    The caller ANDs the list (``select(...).where(*conditions)``). A filter
    left as ``None`` or empty contributes nothing, so rows with a NULL or
    empty value in that column are not excluded.
    """
    conditions: list[ColumnElement[bool]] = []
    if name:
        conditions.append(USER_TABLE.c.name == name)
    if email:
        conditions.append(USER_TABLE.c.email == email)
    return conditions
