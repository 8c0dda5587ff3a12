"""
PasswordResetToken Entity

Single-use secret allowing a user to set a new password.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from src.domain.base import utcnow

TOKEN_VALIDITY = timedelta(hours=1)


@dataclass(frozen=True)
class PasswordResetToken:
    """
    PasswordResetToken entity.

    Business Rules:
    - One active token per user (older tokens are deleted on a new request)
    - Expires after the validity window (1 hour by default)
    - Consumed (deleted) on successful confirmation
    """

    token: str
    user_id: str
    expires_at: datetime
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(cls, user_id: str, token: str, validity: timedelta = TOKEN_VALIDITY) -> "PasswordResetToken":
        now = utcnow()
        return cls(token=token, user_id=user_id, expires_at=now + validity, created_at=now)

    def is_expired(self) -> bool:
        return utcnow() > self.expires_at
