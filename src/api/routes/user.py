from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.app.services.cache_service import ICacheService
from src.app.services.config_service import IConfigService
from src.app.services.email_service import IEmailService
from src.app.services.logger import ILogger
from src.app.services.password_generator import IPasswordGenerator
from src.app.services.password_service import IPasswordService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    SearchUsersUseCase,
    UpdateUserUseCase,
    UserOnboardingUseCase,
)
from src.app.use_cases.users.dtos import (
    DeleteUserCommand,
    DeleteUserResponse,
    GetUserQuery,
    SearchUsersQuery,
    SearchUsersResponse,
    UpdateUserCommand,
    UpdateUserResponse,
    UserOnboardingCommand,
    UserOnboardingResponse,
    UserResponse,
)
from src.depends import (
    get_cache_service,
    get_config_service,
    get_current_user,
    get_email_service,
    get_logger,
    get_password_generator,
    get_password_service,
    get_unit_of_work,
)
from src.domain.entities import UserRole

router = APIRouter(prefix="/users", tags=["User"])


class CreateUserRequest(BaseModel):
    """
    Create user HTTP request payload

    Email format and name bounds are validated by the use case so the
    client receives the domain error codes.
    """

    email: str = Field(..., description="User email address")
    name: str = Field(..., description="Display name (1-100 chars)")
    role: UserRole = Field(default=UserRole.USER)
    send_welcome_email: bool = True


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserOnboardingResponse)
async def create_user(
    request: CreateUserRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_generator: IPasswordGenerator = Depends(get_password_generator),
    password_service: IPasswordService = Depends(get_password_service),
    email_service: IEmailService = Depends(get_email_service),
    config: IConfigService = Depends(get_config_service),
    logger: ILogger = Depends(get_logger),
):
    """
    Create User with onboarding

    Creates the user, sets a temporary password and sends the welcome email.
    A failed welcome email is reported in onboarding_status, not as an error.

    Raises:
        - 400 Bad Request: Invalid email or name
        - 403 Forbidden: Missing CREATE_USER or role elevation
        - 409 Conflict: Email already exists
    """
    command = UserOnboardingCommand(
        email=request.email,
        name=request.name,
        role=request.role,
        requesting_user_id=current_user["user_id"],
        send_welcome_email=request.send_welcome_email,
    )
    use_case = UserOnboardingUseCase(
        CreateUserUseCase(uow, logger),
        uow,
        password_generator,
        password_service,
        email_service,
        config,
        logger,
    )
    return await use_case.create_user_with_onboarding(command)


@router.get("/search", status_code=status.HTTP_200_OK, response_model=SearchUsersResponse)
async def search_users(
    search_term: Optional[str] = Query(default=None, max_length=100),
    roles: Optional[List[UserRole]] = Query(default=None),
    created_after: Optional[datetime] = None,
    created_before: Optional[datetime] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    logger: ILogger = Depends(get_logger),
):
    """
    Search Users (SUPER_ADMIN only)

    Raises:
        - 400 Bad Request: Invalid sort or date range
        - 403 Forbidden: Requesting user is not SUPER_ADMIN
    """
    query = SearchUsersQuery(
        requesting_user_id=current_user["user_id"],
        search_term=search_term,
        roles=roles,
        created_after=created_after,
        created_before=created_before,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    use_case = SearchUsersUseCase(uow, logger)
    return await use_case.execute(query)


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    logger: ILogger = Depends(get_logger),
    cache: ICacheService = Depends(get_cache_service),
):
    """
    Get User

    Raises:
        - 403 Forbidden: Not allowed to view this user
        - 404 Not Found: User does not exist
    """
    use_case = GetUserUseCase(uow, logger, cache)
    return await use_case.execute(GetUserQuery(user_id=user_id, requesting_user_id=current_user["user_id"]))


class UpdateUserRequest(BaseModel):
    """Fields left out are not changed"""

    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None


@router.patch("/{user_id}", status_code=status.HTTP_200_OK, response_model=UpdateUserResponse)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    logger: ILogger = Depends(get_logger),
    cache: ICacheService = Depends(get_cache_service),
):
    """
    Update User

    Raises:
        - 400 Bad Request: Invalid email or name
        - 403 Forbidden: Not allowed to update this user or role elevation
        - 404 Not Found: User does not exist
        - 409 Conflict: Email already exists
    """
    command = UpdateUserCommand(
        user_id=user_id,
        requesting_user_id=current_user["user_id"],
        email=request.email,
        name=request.name,
        role=request.role,
    )
    use_case = UpdateUserUseCase(uow, logger, cache)
    return await use_case.execute(command)


@router.delete("/{user_id}", status_code=status.HTTP_200_OK, response_model=DeleteUserResponse)
async def delete_user(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    logger: ILogger = Depends(get_logger),
    cache: ICacheService = Depends(get_cache_service),
):
    """
    Delete User

    Raises:
        - 403 Forbidden: Self-deletion or not allowed to delete this user
        - 404 Not Found: User does not exist
        - 500 Internal Server Error: Cache invalidation failed (nothing deleted)
    """
    use_case = DeleteUserUseCase(uow, logger, cache)
    return await use_case.execute(DeleteUserCommand(user_id=user_id, requesting_user_id=current_user["user_id"]))
