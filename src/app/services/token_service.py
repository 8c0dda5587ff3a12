from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ITokenService(ABC):
    """Access/refresh token issuance port"""

    @abstractmethod
    def generate_access_token(
        self,
        user_id: str,
        email: str,
        role: str,
        secret: str,
        expires_in: int,
        algorithm: str = "HS256",
    ) -> str:
        """Signed access token valid for expires_in seconds"""
        pass

    @abstractmethod
    def generate_refresh_token(self, secret: str, algorithm: str = "HS256") -> str:
        """Opaque, unguessable refresh token"""
        pass

    @abstractmethod
    def decode_access_token(self, token: str, secret: str, algorithm: str = "HS256") -> Optional[Dict[str, Any]]:
        """Claims of a valid access token, or None"""
        pass
