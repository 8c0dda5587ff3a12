"""
Use Cases

Organized into domain folders:
- auth/: Authentication and password reset flows
- users/: User management and onboarding

Import from subdirectories for better organization.
"""

from .auth import (
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    PasswordResetUseCase,
)
from .users import (
    CreateUserUseCase,
    GetUserUseCase,
    UpdateUserUseCase,
    DeleteUserUseCase,
    SearchUsersUseCase,
    UserOnboardingUseCase,
)

__all__ = [
    # Auth
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "PasswordResetUseCase",
    # Users
    "CreateUserUseCase",
    "GetUserUseCase",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    "SearchUsersUseCase",
    "UserOnboardingUseCase",
]
