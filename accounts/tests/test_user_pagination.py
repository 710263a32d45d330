import math
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.dialects import sqlite
from sqlmodel import Session

from accounts.core.errors import ValidationError
from accounts.core.result import Err
from accounts.models.user import User
from accounts.services.filters import user_filter_conditions
from accounts.services.user_service import UserService


def _seed(session: Session, rows: list[tuple[str, str]]) -> None:
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for index, (name, email) in enumerate(rows):
        created = start + timedelta(minutes=index)
        session.add(
            User(
                name=name,
                email=email,
                password="not-a-real-hash",
                created_at=created,
                updated_at=created,
            )
        )
    session.commit()


def _compiled(conditions) -> list[str]:
    return [
        str(c.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))
        for c in conditions
    ]


def test_conditions_only_for_supplied_filters() -> None:
    assert user_filter_conditions() == []
    assert user_filter_conditions(name="", email=None) == []
    only_name = _compiled(user_filter_conditions(name="Ana"))
    both = _compiled(user_filter_conditions(name="Ana", email="ana@x.com"))

    assert len(only_name) == 1
    assert only_name[0].endswith("name = 'Ana'")
    assert len(both) == 2
    assert both[0].endswith("name = 'Ana'")
    assert both[1].endswith("email = 'ana@x.com'")


@pytest.mark.parametrize(("total", "limit"), [(0, 10), (1, 10), (10, 10), (11, 10), (7, 3)])
def test_pagination_math(
    service: UserService,
    session: Session,
    total: int,
    limit: int,
) -> None:
    _seed(session, [(f"User {i}", f"user{i}@x.com") for i in range(total)])

    page = service.list_users(limit=limit).unwrap()

    assert page.pagination.total_items == total
    assert page.pagination.total_pages == math.ceil(total / limit)
    assert page.pagination.current_page == 1
    assert page.pagination.items_per_page == limit
    assert len(page.data) == min(total, limit)


def test_pages_are_disjoint_and_ordered(service: UserService, session: Session) -> None:
    _seed(session, [(f"User {i}", f"user{i}@x.com") for i in range(5)])

    first = service.list_users(page=1, limit=2).unwrap()
    second = service.list_users(page=2, limit=2).unwrap()
    last = service.list_users(page=3, limit=2).unwrap()

    assert [u.name for u in first.data] == ["User 0", "User 1"]
    assert [u.name for u in second.data] == ["User 2", "User 3"]
    assert [u.name for u in last.data] == ["User 4"]
    assert last.pagination.total_items == 5
    assert last.pagination.total_pages == 3


def test_page_past_the_end_keeps_total(service: UserService, session: Session) -> None:
    _seed(session, [(f"User {i}", f"user{i}@x.com") for i in range(4)])

    page = service.list_users(page=9, limit=3).unwrap()

    assert page.data == []
    assert page.pagination.total_items == 4
    assert page.pagination.total_pages == 2
    assert page.pagination.current_page == 9


def test_filters_are_conjunctive(service: UserService, session: Session) -> None:
    _seed(
        session,
        [("Ana", "ana@x.com"), ("Bia", "bia@x.com"), ("Ana", "ana.two@x.com")],
    )

    by_name = service.list_users(name="Ana").unwrap()
    by_email = service.list_users(email="bia@x.com").unwrap()
    both = service.list_users(name="Ana", email="bia@x.com").unwrap()
    exact = service.list_users(name="Ana", email="ana.two@x.com").unwrap()

    assert by_name.pagination.total_items == 2
    assert by_email.pagination.total_items == 1
    assert both.data == []
    assert both.pagination.total_items == 0
    assert both.pagination.total_pages == 0
    assert [u.email for u in exact.data] == ["ana.two@x.com"]


def test_absent_filter_keeps_blank_names(service: UserService, session: Session) -> None:
    _seed(session, [("", "blank@x.com"), ("Ana", "ana@x.com")])

    page = service.list_users().unwrap()

    assert {u.email for u in page.data} == {"blank@x.com", "ana@x.com"}


@pytest.mark.parametrize(("page", "limit", "field"), [(0, 10, "page"), (1, 0, "limit")])
def test_invalid_paging_is_rejected(
    service: UserService,
    page: int,
    limit: int,
    field: str,
) -> None:
    result = service.list_users(page=page, limit=limit)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    assert [v.field for v in result.error.violations] == [field]
