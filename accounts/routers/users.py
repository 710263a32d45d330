from typing import Annotated, Any, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlmodel import Session

from accounts.core.config import settings
from accounts.core.db import get_session
from accounts.core.errors import (
    DuplicateEmailError,
    NotFoundError,
    UserServiceError,
    ValidationError,
)
from accounts.core.result import Err
from accounts.schemas.user import UserPage, UserRead, UserUpdate
from accounts.services.user_service import UserService
from accounts.services.user_store import SqlUserStore
from accounts.services.validation import UserCreateValidator

router = APIRouter(prefix="/users", tags=["users"])

SessionDep = Annotated[Session, Depends(get_session)]


def get_user_service(session: SessionDep) -> UserService:
    return UserService(
        store=SqlUserStore(session),
        validator=UserCreateValidator(password_min_length=settings.password_min_length),
    )


ServiceDep = Annotated[UserService, Depends(get_user_service)]


def _raise_for(error: UserServiceError) -> NoReturn:
    if isinstance(error, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error.as_detail(),
        )
    if isinstance(error, DuplicateEmailError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error.message,
    )


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    service: ServiceDep,
    payload: Annotated[Any, Body()] = None,
) -> UserRead:
    result = service.create_user(payload)
    if isinstance(result, Err):
        _raise_for(result.error)
    return result.value


@router.get("", response_model=UserPage)
def list_users(
    service: ServiceDep,
    name: Annotated[str | None, Query()] = None,
    email: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> UserPage:
    result = service.list_users(name=name, email=email, page=page, limit=limit)
    if isinstance(result, Err):
        _raise_for(result.error)
    return result.value


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, service: ServiceDep) -> UserRead:
    result = service.get_user_by_id(user_id)
    if isinstance(result, Err):
        _raise_for(result.error)
    return result.value


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: str, payload: UserUpdate, service: ServiceDep) -> UserRead:
    result = service.update_user(user_id, payload.name, str(payload.email))
    if isinstance(result, Err):
        _raise_for(result.error)
    return result.value


# The deleted row carries the password hash; only the public fields go out
@router.delete("/{user_id}", response_model=UserRead)
def delete_user(user_id: str, service: ServiceDep) -> UserRead:
    result = service.delete_user(user_id)
    if isinstance(result, Err):
        _raise_for(result.error)
    return UserRead.model_validate(result.value, from_attributes=True)
