from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from accounts.core.errors import (
    CreateFailedError,
    DuplicateEmailError,
    FieldViolation,
    NotFoundError,
    StoreError,
    ValidationError,
)
from accounts.core.result import Err, Ok, Result
from accounts.core.security import hash_password
from accounts.models.user import User
from accounts.schemas.user import Pagination, UserPage, UserRead
from accounts.services.filters import user_filter_conditions
from accounts.services.user_store import UserStore
from accounts.services.validation import UserCreateValidator

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _to_read(user: User) -> UserRead:
    return UserRead.model_validate(user, from_attributes=True)


def _store_failure(operation: str, err: SQLAlchemyError) -> Err:
    logger.exception("user store failed during %s", operation)
    return Err(StoreError(operation, err))


class UserService:
    """Create, list, fetch, update and delete user accounts.

    The service keeps no state besides its collaborators, so one instance
    per request (or one shared instance) are equally fine. Every method
    returns ``Ok`` with the shaped value or ``Err`` with exactly one
    classified error; expected failures are never raised.
    """

    def __init__(
        self,
        store: UserStore,
        validator: UserCreateValidator | None = None,
        hasher: Callable[[str], str] = hash_password,
    ) -> None:
        self.store = store
        self.validator = validator or UserCreateValidator()
        self.hasher = hasher

    def create_user(self, payload: Any) -> Result[UserRead]:
        validated = self.validator.validate(payload)
        if isinstance(validated, Err):
            logger.warning("rejected user payload: %s", validated.error.message)
            return validated
        data = validated.value
        email = str(data.email)

        try:
            existing = self.store.find_by_email(email)
        except SQLAlchemyError as err:
            logger.exception("user store failed during create")
            return Err(CreateFailedError(err))
        if existing is not None:
            logger.warning("rejected duplicate email on create")
            return Err(DuplicateEmailError(email))

        password_hash = self.hasher(data.password)

        try:
            user = self.store.insert(name=data.name, email=email, password=password_hash)
        except IntegrityError as err:
            # Lost the race against a concurrent create; the unique constraint caught it
            if _is_email_conflict(err):
                logger.warning("email unique constraint rejected insert")
                return Err(DuplicateEmailError(email))
            logger.exception("user store failed during create")
            return Err(CreateFailedError(err))
        except SQLAlchemyError as err:
            logger.exception("user store failed during create")
            return Err(CreateFailedError(err))

        logger.info("created user %s", user.id)
        return Ok(_to_read(user))

    def list_users(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> Result[UserPage]:
        violations: list[FieldViolation] = []
        if page < 1:
            violations.append(FieldViolation("page", "page must be at least 1"))
        if limit < 1:
            violations.append(FieldViolation("limit", "limit must be at least 1"))
        if violations:
            return Err(ValidationError(violations))

        conditions = user_filter_conditions(name=name, email=email)
        offset = (page - 1) * limit
        try:
            users, total_items = self.store.page(conditions, limit=limit, offset=offset)
        except SQLAlchemyError as err:
            return _store_failure("list", err)

        return Ok(
            UserPage(
                data=[_to_read(user) for user in users],
                pagination=Pagination(
                    total_items=total_items,
                    total_pages=math.ceil(total_items / limit),
                    current_page=page,
                    items_per_page=limit,
                ),
            )
        )

    def get_user_by_id(self, user_id: str) -> Result[UserRead]:
        try:
            user = self.store.get(user_id)
        except SQLAlchemyError as err:
            return _store_failure("get", err)
        if user is None:
            return Err(NotFoundError(user_id))
        return Ok(_to_read(user))

    def update_user(self, user_id: str, name: str, email: str) -> Result[UserRead]:
        # Email uniqueness against other rows is not re-checked here
        try:
            if self.store.get(user_id) is None:
                return Err(NotFoundError(user_id))
            user = self.store.update(user_id, name=name, email=email)
        except SQLAlchemyError as err:
            return _store_failure("update", err)
        if user is None:
            return Err(NotFoundError(user_id))

        logger.info("updated user %s", user_id)
        return Ok(_to_read(user))

    def delete_user(self, user_id: str) -> Result[User]:
        """Delete a user and return the removed row.

        The returned ``User`` still carries the password hash; callers must
        not forward it as is.
        """
        try:
            if self.store.get(user_id) is None:
                return Err(NotFoundError(user_id))
            user = self.store.delete(user_id)
        except SQLAlchemyError as err:
            return _store_failure("delete", err)
        if user is None:
            return Err(NotFoundError(user_id))

        logger.info("deleted user %s", user_id)
        return Ok(user)


def _is_email_conflict(err: IntegrityError) -> bool:
    text = str(err.orig).lower()
    # Postgres names the constraint, SQLite names the column
    return "uq_user_email" in text or "unique constraint failed: user.email" in text
