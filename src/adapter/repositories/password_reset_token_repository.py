from typing import Optional

from sqlalchemy import delete
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.models import PasswordResetTokenModel
from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.base import hash_token, utcnow
from src.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token, stored by SHA-256 hash"""
        model = PasswordResetTokenModel.from_entity(token)
        self.session.add(model)
        await self.session.flush()
        return token

    async def find_by_token(self, token: str) -> Optional[PasswordResetToken]:
        """Get password reset token by its plaintext value"""
        stmt = select(PasswordResetTokenModel).where(PasswordResetTokenModel.token_hash == hash_token(token))
        result = await self.session.exec(stmt)
        model = result.one_or_none()
        return model.to_entity(token) if model else None

    async def delete_by_user_id(self, user_id: str) -> None:
        await self.session.execute(
            delete(PasswordResetTokenModel).where(col(PasswordResetTokenModel.user_id) == user_id)
        )
        await self.session.flush()

    async def delete_expired_tokens(self) -> int:
        result = await self.session.execute(
            delete(PasswordResetTokenModel).where(col(PasswordResetTokenModel.expires_at) < utcnow())
        )
        await self.session.flush()
        return result.rowcount
