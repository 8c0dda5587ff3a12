from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def save(self, token: PasswordResetToken) -> PasswordResetToken:
        """Persist a new password reset token"""
        pass

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[PasswordResetToken]:
        """Find a password reset token by its plaintext value"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: str) -> None:
        """Delete every reset token of a user"""
        pass

    @abstractmethod
    async def delete_expired_tokens(self) -> int:
        """Delete expired tokens. Returns count deleted"""
        pass
