"""User Routes — CRUD endpoints for the User resource.

Invariants:
    - Write bodies pass core/validate_user.py before the service is invoked;
      any violation short-circuits with 400 and the service is never called
    - Service None/False results become UserNotFoundError (404) here, not in the service
    - DuplicateEmailError propagates untouched to the global handler (409)
    - Writes require a JSON Content-Type (415 otherwise)
    - The collection answers on both /api/v1/users and /api/v1/users/

Design Decisions:
    - Thin routes: parse, validate, delegate, render (ADR: ExMA impureim sandwich)
    - UserService built per request from the request-scoped DB session via Depends
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.api.content_type import require_json_body
from user_api.core.domain_types import UserId
from user_api.core.errors import UserNotFoundError, UserValidationError
from user_api.core.validate_user import to_field_errors, validate_user
from user_api.infrastructure.database import get_db
from user_api.infrastructure.user_repository import SqlUserRepository
from user_api.schemas.user import ErrorResponse, UserRequest, UserResponse
from user_api.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["User Management"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}
_BAD_REQUEST = {
    400: {"model": ErrorResponse, "description": "Invalid input - validation failed"},
}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Email already exists"}}
_UNSUPPORTED = {
    415: {"model": ErrorResponse, "description": "Content-Type is not JSON"},
}


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(SqlUserRepository(db))


def _check_candidate(body: UserRequest) -> None:
    violations = validate_user(body)
    if violations:
        raise UserValidationError(to_field_errors(violations))


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
    dependencies=[Depends(require_json_body)],
)
@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    description="Creates a new user with the provided information. Email must be unique.",
    responses={**_BAD_REQUEST, **_CONFLICT, **_UNSUPPORTED},
    dependencies=[Depends(require_json_body)],
)
async def create_user(
    body: UserRequest, service: UserService = Depends(get_user_service),
):
    logger.info(f"Received request to create user with email: {body.email}")
    _check_candidate(body)
    user = await service.create_user(body)
    return UserResponse.model_validate(user)


@router.get("/", response_model=list[UserResponse], include_in_schema=False)
@router.get(
    "",
    response_model=list[UserResponse],
    summary="Get all users",
    description="Retrieves a list of all users in the system",
)
async def list_users(service: UserService = Depends(get_user_service)):
    users = await service.get_all_users()
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
    description="Retrieves a specific user by their unique identifier",
    responses=_NOT_FOUND,
)
async def get_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    user = await service.get_user_by_id(UserId(user_id))
    if user is None:
        raise UserNotFoundError(user_id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update an existing user",
    description="Updates all fields of an existing user. Email must remain unique.",
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_CONFLICT, **_UNSUPPORTED},
    dependencies=[Depends(require_json_body)],
)
async def update_user(
    user_id: str,
    body: UserRequest,
    service: UserService = Depends(get_user_service),
):
    logger.info(f"Received request to update user ID: {user_id}")
    _check_candidate(body)
    user = await service.update_user(UserId(user_id), body)
    if user is None:
        raise UserNotFoundError(user_id)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
    description="Permanently deletes a user by their unique identifier",
    responses=_NOT_FOUND,
)
async def delete_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    logger.info(f"Received request to delete user ID: {user_id}")
    if not await service.delete_user(UserId(user_id)):
        raise UserNotFoundError(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
