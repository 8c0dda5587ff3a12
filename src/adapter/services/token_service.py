import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from src.app.services.token_service import ITokenService


class JoseTokenService(ITokenService):
    """JWT access tokens (python-jose) and random refresh tokens"""

    def generate_access_token(
        self,
        user_id: str,
        email: str,
        role: str,
        secret: str,
        expires_in: int,
        algorithm: str = "HS256",
    ) -> str:
        """
        Generate JWT access token

        Args:
            user_id: User id
            email: Normalized email
            role: SUPER_ADMIN, MANAGER or USER
            secret: Signing secret
            expires_in: Lifetime in seconds
            algorithm: Signing algorithm

        Returns:
            JWT token string
        """
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "user_id": user_id,
            "email": email,
            "role": role,
            "type": "access",
            "exp": now + timedelta(seconds=expires_in),
            "iat": now,
        }
        return jwt.encode(payload, secret, algorithm=algorithm)

    def generate_refresh_token(self, secret: str, algorithm: str = "HS256") -> str:
        # Opaque random value; only its hash is stored
        return secrets.token_urlsafe(48)

    def decode_access_token(self, token: str, secret: str, algorithm: str = "HS256") -> Optional[Dict[str, Any]]:
        """Decoded payload dict or None if invalid, expired or not an access token"""
        try:
            payload = jwt.decode(token, secret, algorithms=[algorithm])
        except JWTError:
            return None
        if payload.get("type") != "access":
            return None
        return payload
