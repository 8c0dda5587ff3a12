from abc import ABC, abstractmethod

from src.domain.services.password_policy import PasswordStrength


class IPasswordGenerator(ABC):
    """Password and reset-token generation port"""

    @abstractmethod
    async def generate_temporary_password(self) -> str:
        pass

    @abstractmethod
    async def generate_reset_token(self) -> str:
        pass

    @abstractmethod
    def validate_password_strength(self, password: str) -> PasswordStrength:
        pass
