"""
Console Email Service

IEmailService that logs outgoing mail instead of delivering it.
Sent messages are kept in memory for inspection.
"""

import logging
from typing import Any, Dict, List

from src.app.services.email_service import IEmailService

logger = logging.getLogger(__name__)


class ConsoleEmailService(IEmailService):
    def __init__(self, from_email: str = "noreply@example.com"):
        self.from_email = from_email
        self.sent_emails: List[Dict[str, Any]] = []

    async def send_welcome_email(self, to: str, name: str, temporary_password: str, login_url: str) -> None:
        body = (
            f"Hello {name},\n\n"
            f"An account has been created for you.\n"
            f"Temporary password: {temporary_password}\n"
            f"Sign in at {login_url} and choose a new password.\n"
        )
        await self._send(to, "Welcome", body, template="welcome")

    async def send_password_reset_email(self, to: str, name: str, token: str, reset_url: str) -> None:
        body = (
            f"Hello {name},\n\n"
            f"Reset your password here: {reset_url}?token={token}\n"
            f"This link expires in one hour. Ignore this email if you did not ask for it.\n"
        )
        await self._send(to, "Password reset", body, template="password_reset")

    async def send_notification_email(self, to: str, subject: str, body: str) -> None:
        await self._send(to, subject, body, template="notification")

    async def _send(self, to: str, subject: str, body: str, template: str) -> None:
        self.sent_emails.append(
            {"from": self.from_email, "to": to, "subject": subject, "body": body, "template": template}
        )
        logger.info(f"Email '{template}' sent to {to}")
