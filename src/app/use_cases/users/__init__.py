"""
User Management Use Cases

All user-related business logic.
"""

from .create_user_use_case import CreateUserUseCase
from .get_user_use_case import GetUserUseCase
from .update_user_use_case import UpdateUserUseCase
from .delete_user_use_case import DeleteUserUseCase
from .search_users_use_case import SearchUsersUseCase
from .user_onboarding_use_case import UserOnboardingUseCase

__all__ = [
    "CreateUserUseCase",
    "GetUserUseCase",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    "SearchUsersUseCase",
    "UserOnboardingUseCase",
]
