"""
SQLModel table definitions

Imported together so SQLModel.metadata knows every table.
"""

from .user import UserModel
from .refresh_token import RefreshTokenModel
from .password_reset_token import PasswordResetTokenModel

__all__ = [
    "UserModel",
    "RefreshTokenModel",
    "PasswordResetTokenModel",
]
