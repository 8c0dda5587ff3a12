"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import UserRole


# ============================================================================
# Command DTOs
# ============================================================================


class LoginCommand(BaseModel):
    email: str
    password: str
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class RefreshTokenCommand(BaseModel):
    refresh_token: str
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class LogoutCommand(BaseModel):
    """Revoke the given refresh token, or every token of its owner when logout_all"""

    refresh_token: str
    logout_all: bool = False


class InitiatePasswordResetCommand(BaseModel):
    email: str


class ConfirmPasswordResetCommand(BaseModel):
    token: str
    new_password: str


# ============================================================================
# Response DTOs
# ============================================================================


class AuthenticatedUser(BaseModel):
    """User information in authentication responses"""

    id: str
    email: str
    name: str
    role: UserRole


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    refresh_token: str
    user: AuthenticatedUser
    expires_in: int
    token_type: str = "Bearer"


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


class LogoutResponse(BaseModel):
    success: bool
    revoked_count: int


class InitiatePasswordResetResponse(BaseModel):
    """Always successful, whether or not the email is registered"""

    success: bool
    message: str


class ValidateResetTokenResponse(BaseModel):
    is_valid: bool
    user_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None


class ConfirmPasswordResetResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    feedback: List[str] = []


class CleanupExpiredTokensResponse(BaseModel):
    deleted_count: int
