from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from accounts.core.errors import UserServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: UserServiceError

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Union[Ok[T], Err]
