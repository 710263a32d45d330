"""Classified failures returned by the user service.

Each class maps to one caller reaction (bad input, conflict, missing row,
store failure), so the HTTP layer can pick a status code from the type
alone instead of parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


class UserServiceError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(UserServiceError):
    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        summary = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        super().__init__(f"validation failed: {summary}")

    def as_detail(self) -> list[dict[str, str]]:
        return [{"field": v.field, "message": v.message} for v in self.violations]


class DuplicateEmailError(UserServiceError):
    def __init__(self, email: str) -> None:
        super().__init__("a user with this email already exists")
        self.email = email


class NotFoundError(UserServiceError):
    def __init__(self, user_id: str) -> None:
        super().__init__("user not found")
        self.user_id = user_id


class StoreError(UserServiceError):
    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"store failure during {operation}")
        self.operation = operation
        self.cause = cause
        self.__cause__ = cause


class CreateFailedError(StoreError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__("create", cause)
