"""
User Management Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the users domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.app.repositories.user_repository import PaginationMeta
from src.domain.entities import User, UserRole


# ============================================================================
# Command DTOs
# ============================================================================


class CreateUserCommand(BaseModel):
    """Create a user on behalf of requesting_user_id"""

    email: str
    name: str
    role: UserRole
    requesting_user_id: str


class GetUserQuery(BaseModel):
    user_id: str
    requesting_user_id: str


class UpdateUserCommand(BaseModel):
    """Fields left as None are not changed"""

    user_id: str
    requesting_user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None


class DeleteUserCommand(BaseModel):
    user_id: str
    requesting_user_id: str


class SearchUsersQuery(BaseModel):
    requesting_user_id: str
    search_term: Optional[str] = None
    roles: Optional[List[UserRole]] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class UserOnboardingCommand(CreateUserCommand):
    send_welcome_email: bool = True


# ============================================================================
# Response DTOs
# ============================================================================


class CreateUserResponse(BaseModel):
    """Response for create user use case"""

    id: str
    email: str
    name: str
    role: UserRole
    created_at: datetime


class UserResponse(BaseModel):
    """Response for get user use case"""

    id: str
    email: str
    name: str
    role: UserRole
    password_change_required: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email.value,
            name=user.name,
            role=user.role,
            password_change_required=user.password_change_required,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UpdateUserResponse(BaseModel):
    """Response for update user use case"""

    id: str
    email: str
    name: str
    role: UserRole
    updated_at: datetime


class DeleteUserResponse(BaseModel):
    """Response for delete user use case"""

    success: bool
    deleted_user_id: str
    deleted_at: datetime


class SearchUsersResponse(BaseModel):
    """Response for search users use case"""

    data: List[UserResponse]
    meta: PaginationMeta


class OnboardingStatus(BaseModel):
    password_generated: bool
    email_sent: bool
    audit_events: List[str]


class UserOnboardingResponse(CreateUserResponse):
    """Created user plus the outcome of each onboarding step"""

    onboarding_status: OnboardingStatus
