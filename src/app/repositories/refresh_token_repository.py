from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def save(self, refresh_token: RefreshToken) -> RefreshToken:
        """Persist a new refresh token"""
        pass

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> List[RefreshToken]:
        """Get all refresh tokens for a user"""
        pass

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[RefreshToken]:
        """Find a refresh token by its plaintext value"""
        pass

    @abstractmethod
    async def revoke_by_token(self, token: str, reason: str) -> bool:
        """Revoke a single token. Returns False when no active token matched"""
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: str, reason: str = "revoked") -> int:
        """Revoke all active tokens of a user. Returns count revoked"""
        pass

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete expired or revoked tokens. Returns count deleted"""
        pass
