"""
RefreshToken Entity

Long-lived token used to obtain new access tokens.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

from src.domain.base import generate_uuid, hash_token, utcnow
from src.domain.exceptions import TokenAlreadyRevokedError

MIN_TOKEN_LENGTH = 32
MAX_LIFETIME = timedelta(days=365)


@dataclass(frozen=True)
class RefreshToken:
    """
    RefreshToken entity.

    Business Rules:
    - Only the SHA-256 hash of the token is kept, never the plaintext
    - expires_at is fixed at creation
    - Once revoked, a token cannot be un-revoked
    """

    user_id: str
    token_hash: str
    expires_at: datetime
    id: str = field(default_factory=generate_uuid)
    created_at: datetime = field(default_factory=utcnow)
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    is_revoked: bool = False
    revoked_at: Optional[datetime] = None
    revoked_reason: Optional[str] = None

    @classmethod
    def issue(
        cls,
        user_id: str,
        token: str,
        expires_at: datetime,
        device_id: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> "RefreshToken":
        if not user_id or not user_id.strip():
            raise ValueError("User ID cannot be empty")
        if not token or not token.strip():
            raise ValueError("Token cannot be empty")
        if len(token) < MIN_TOKEN_LENGTH:
            raise ValueError(f"Token must be at least {MIN_TOKEN_LENGTH} characters long")

        now = utcnow()
        if expires_at <= now:
            raise ValueError("Expiration date must be in the future")
        if expires_at > now + MAX_LIFETIME:
            raise ValueError("Expiration date cannot be more than 1 year in the future")

        return cls(
            user_id=user_id,
            token_hash=hash_token(token),
            expires_at=expires_at,
            created_at=now,
            device_id=device_id,
            user_agent=user_agent,
            ip_address=ip_address,
        )

    def revoke(self, reason: str) -> "RefreshToken":
        if self.is_revoked:
            raise TokenAlreadyRevokedError(self.id)
        return replace(self, is_revoked=True, revoked_at=utcnow(), revoked_reason=reason)

    def verify_token(self, plain_token: str) -> bool:
        return hash_token(plain_token) == self.token_hash

    def is_expired(self) -> bool:
        return utcnow() >= self.expires_at

    def is_valid(self) -> bool:
        return not self.is_revoked and not self.is_expired()

    def time_to_expiry(self) -> int:
        """Seconds until expiry, never negative"""
        return max(0, int((self.expires_at - utcnow()).total_seconds()))

    def matches_device(self, device_id: Optional[str] = None, user_agent: Optional[str] = None) -> bool:
        if self.device_id and device_id:
            return self.device_id == device_id
        if self.user_agent and user_agent:
            return self.user_agent == user_agent
        return True
