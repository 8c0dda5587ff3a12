from abc import ABC, abstractmethod


class IPasswordService(ABC):
    """Password hashing port"""

    @abstractmethod
    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Compare a plaintext password with a stored hash"""
        pass

    @abstractmethod
    async def hash(self, plain_password: str) -> str:
        """Hash a plaintext password for storage"""
        pass
