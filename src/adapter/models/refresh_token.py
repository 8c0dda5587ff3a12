"""
Refresh token table

Stores SHA-256 hashes of refresh tokens, never the tokens themselves.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_uuid, utcnow
from src.domain.entities import RefreshToken


class RefreshTokenModel(SQLModel, table=True):
    __tablename__ = "refresh_tokens"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True, ondelete="CASCADE")
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hex

    device_id: Optional[str] = Field(default=None, max_length=255)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    ip_address: Optional[str] = Field(default=None, max_length=45)

    is_revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_reason: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_refresh_token_expires_at", "expires_at"),
        Index("idx_refresh_token_revoked", "is_revoked"),
    )

    @classmethod
    def from_entity(cls, token: RefreshToken) -> "RefreshTokenModel":
        return cls(
            id=token.id,
            user_id=token.user_id,
            token_hash=token.token_hash,
            device_id=token.device_id,
            user_agent=token.user_agent,
            ip_address=token.ip_address,
            is_revoked=token.is_revoked,
            revoked_at=token.revoked_at,
            revoked_reason=token.revoked_reason,
            created_at=token.created_at,
            expires_at=token.expires_at,
        )

    def to_entity(self) -> RefreshToken:
        return RefreshToken(
            id=self.id,
            user_id=self.user_id,
            token_hash=self.token_hash,
            device_id=self.device_id,
            user_agent=self.user_agent,
            ip_address=self.ip_address,
            is_revoked=self.is_revoked,
            revoked_at=self.revoked_at,
            revoked_reason=self.revoked_reason,
            created_at=self.created_at,
            expires_at=self.expires_at,
        )
