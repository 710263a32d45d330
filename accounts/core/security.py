from __future__ import annotations

from typing import cast

from passlib.context import CryptContext

# argon2 salts every hash, so hashing the same password twice never matches
_pwd = CryptContext(
    schemes=["argon2"],
    default="argon2",
    deprecated="auto",
)


def hash_password(raw: str) -> str:
    return cast(str, _pwd.hash(raw))
