from abc import ABC, abstractmethod

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """
    Transaction boundary shared by the user, refresh-token and reset-token
    repositories.

    Usage::

        async with uow:
            user = await uow.users.find_by_id(user_id)
            await uow.users.update(user.with_changes(name="New"))
            await uow.commit()

    Leaving the block without ``commit()`` discards every pending change.
    """

    users: IUserRepository
    refresh_tokens: IRefreshTokenRepository
    password_reset_tokens: IPasswordResetTokenRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc, tb) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
