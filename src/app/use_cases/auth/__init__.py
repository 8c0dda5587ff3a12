"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase, PLACEHOLDER_HASH
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .cleanup_refresh_tokens_use_case import CleanupRefreshTokensUseCase
from .password_reset_use_case import PasswordResetUseCase
from .dtos import (
    LoginCommand,
    RefreshTokenCommand,
    LogoutCommand,
    InitiatePasswordResetCommand,
    ConfirmPasswordResetCommand,
    AuthenticatedUser,
    LoginResponse,
    RefreshTokenResponse,
    LogoutResponse,
    InitiatePasswordResetResponse,
    ValidateResetTokenResponse,
    ConfirmPasswordResetResponse,
    CleanupExpiredTokensResponse,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "CleanupRefreshTokensUseCase",
    "PasswordResetUseCase",
    "PLACEHOLDER_HASH",
    # DTOs - Commands
    "LoginCommand",
    "RefreshTokenCommand",
    "LogoutCommand",
    "InitiatePasswordResetCommand",
    "ConfirmPasswordResetCommand",
    # DTOs - Responses
    "AuthenticatedUser",
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "InitiatePasswordResetResponse",
    "ValidateResetTokenResponse",
    "ConfirmPasswordResetResponse",
    "CleanupExpiredTokensResponse",
]
