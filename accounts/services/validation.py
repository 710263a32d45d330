from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from accounts.core.errors import FieldViolation, ValidationError
from accounts.core.result import Err, Ok, Result
from accounts.schemas.user import DEFAULT_PASSWORD_MIN_LENGTH, UserCreate


def _field_name(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "__root__"


class UserCreateValidator:
    """Turns an untrusted create payload into a ``UserCreate``.

    Malformed input is reported as ``Err(ValidationError)`` listing every
    field violation; ``validate`` itself never raises for bad payloads.
    """

    def __init__(self, password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH) -> None:
        self.password_min_length = password_min_length

    def validate(self, payload: Any) -> Result[UserCreate]:
        if isinstance(payload, UserCreate):
            payload = payload.model_dump()
        try:
            data = UserCreate.model_validate(
                payload,
                context={"password_min_length": self.password_min_length},
            )
        except PydanticValidationError as err:
            violations = [
                FieldViolation(field=_field_name(e["loc"]), message=e["msg"])
                for e in err.errors()
            ]
            return Err(ValidationError(violations))
        return Ok(data)
