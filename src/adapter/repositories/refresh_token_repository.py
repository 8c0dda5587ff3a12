from typing import List, Optional

from sqlalchemy import delete, or_, update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.models import RefreshTokenModel
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.base import hash_token, utcnow
from src.domain.entities import RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """RefreshToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, refresh_token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        model = RefreshTokenModel.from_entity(refresh_token)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return model.to_entity()

    async def find_by_user_id(self, user_id: str) -> List[RefreshToken]:
        """Get all refresh tokens for a user"""
        stmt = (
            select(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id)
            .order_by(col(RefreshTokenModel.created_at).desc())
        )
        result = await self.session.exec(stmt)
        return [model.to_entity() for model in result.all()]

    async def find_by_token(self, token: str) -> Optional[RefreshToken]:
        """
        Find a refresh token by its plaintext value.

        Revoked and expired tokens are returned too; the caller decides
        which error to report.
        """
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token_hash == hash_token(token))
        result = await self.session.exec(stmt)
        model = result.one_or_none()
        return model.to_entity() if model else None

    async def revoke_by_token(self, token: str, reason: str) -> bool:
        """Revoke a single active token"""
        stmt = (
            update(RefreshTokenModel)
            .where(
                col(RefreshTokenModel.token_hash) == hash_token(token),
                col(RefreshTokenModel.is_revoked) == False,  # noqa: E712
            )
            .values(is_revoked=True, revoked_at=utcnow(), revoked_reason=reason)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_by_user_id(self, user_id: str, reason: str = "revoked") -> int:
        """Revoke all active tokens for a user"""
        stmt = (
            update(RefreshTokenModel)
            .where(
                col(RefreshTokenModel.user_id) == user_id,
                col(RefreshTokenModel.is_revoked) == False,  # noqa: E712
            )
            .values(is_revoked=True, revoked_at=utcnow(), revoked_reason=reason)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self) -> int:
        """Delete expired or revoked tokens"""
        stmt = delete(RefreshTokenModel).where(
            or_(
                col(RefreshTokenModel.expires_at) <= utcnow(),
                col(RefreshTokenModel.is_revoked) == True,  # noqa: E712
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
