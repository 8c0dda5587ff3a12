"""
Password reset token table

Tokens are looked up by SHA-256 hash; the plaintext only travels by email.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_uuid, hash_token, utcnow
from src.domain.entities import PasswordResetToken


class PasswordResetTokenModel(SQLModel, table=True):
    __tablename__ = "password_reset_tokens"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True, ondelete="CASCADE")
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hex

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)

    @classmethod
    def from_entity(cls, token: PasswordResetToken) -> "PasswordResetTokenModel":
        return cls(
            user_id=token.user_id,
            token_hash=hash_token(token.token),
            created_at=token.created_at,
            expires_at=token.expires_at,
        )

    def to_entity(self, token: str) -> PasswordResetToken:
        return PasswordResetToken(
            token=token,
            user_id=self.user_id,
            expires_at=self.expires_at,
            created_at=self.created_at,
        )
