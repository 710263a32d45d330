from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

DEFAULT_PASSWORD_MIN_LENGTH = 8


class UserCreate(BaseModel):
    name: str = Field(max_length=255)
    email: EmailStr
    password: str = Field(max_length=256)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    # Minimum length is policy supplied by the validator through the context
    @field_validator("password")
    @classmethod
    def _password_policy(cls, v: str, info: ValidationInfo) -> str:
        context = info.context or {}
        min_length = int(context.get("password_min_length", DEFAULT_PASSWORD_MIN_LENGTH))
        if len(v) < min_length:
            raise ValueError(f"password must be at least {min_length} characters")
        return v


class UserUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    # ORM -> schema conversion; password is not a field so it never leaks
    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    total_items: int
    total_pages: int
    current_page: int
    items_per_page: int


class UserPage(BaseModel):
    data: list[UserRead]
    pagination: Pagination
