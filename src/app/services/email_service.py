from abc import ABC, abstractmethod


class IEmailService(ABC):
    """Outbound email port"""

    @abstractmethod
    async def send_welcome_email(self, to: str, name: str, temporary_password: str, login_url: str) -> None:
        pass

    @abstractmethod
    async def send_password_reset_email(self, to: str, name: str, token: str, reset_url: str) -> None:
        pass

    @abstractmethod
    async def send_notification_email(self, to: str, subject: str, body: str) -> None:
        pass
