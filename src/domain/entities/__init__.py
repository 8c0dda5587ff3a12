"""
Domain Entities

All domain entities organized by model.
"""

from .enums import ROLE_PERMISSIONS, Permission, UserRole
from .user import User
from .refresh_token import RefreshToken
from .password_reset_token import PasswordResetToken

__all__ = [
    # Enums
    "UserRole",
    "Permission",
    "ROLE_PERMISSIONS",
    # Entities
    "User",
    "RefreshToken",
    "PasswordResetToken",
]
