"""
Login Use Case

Handles user authentication and issues an access/refresh token pair.
"""

import time
from datetime import timedelta
from typing import Any, Dict

from src.app.services.config_service import IConfigService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.password_service import IPasswordService
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RefreshToken, User
from src.domain.exceptions import InvalidCredentialsError, InvalidEmailFormatError
from src.domain.value_objects import Email

from .dtos import AuthenticatedUser, LoginCommand, LoginResponse

# Well-formed bcrypt hash that matches no password; verified against when the
# user is unknown or has no credentials so both paths cost the same.
PLACEHOLDER_HASH = "$2b$12$C6UzMDM.H6dfI/f/IKcEeO5eG3dpvJ/0AyCqGEnb1WNkxGqSK/dXC"


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Unknown email and wrong password raise the same InvalidCredentialsError
    - Password is always verified, against a placeholder hash if needed
    - Previous refresh tokens are revoked (best-effort)
    - Refresh token stored hashed with device metadata, expiring after the
      configured number of days
    - InvalidCredentialsError is never logged with detail
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_service: IPasswordService,
        token_service: ITokenService,
        config: IConfigService,
        logger: ILogger,
    ):
        self.uow = uow
        self.password_service = password_service
        self.token_service = token_service
        self.config = config
        self.logger = logger

    async def execute(self, command: LoginCommand) -> LoginResponse:
        """
        Execute login use case.

        Args:
            command: LoginCommand with credentials and optional device metadata

        Returns:
            LoginResponse containing tokens and the authenticated user

        Raises:
            InvalidCredentialsError: unknown email or wrong password
        """
        started = time.perf_counter()
        request_context = {
            "operation": "Login",
            "device_id": command.device_id,
            "ip_address": command.ip_address,
        }
        log = self.logger.child(request_context)
        log.info("operations.auth.login_attempt")

        try:
            async with self.uow:
                user = await self._authenticate(command)

                await self._revoke_existing_tokens(user.id, log)

                log.debug("operations.auth.token_generation")
                access_token = self.token_service.generate_access_token(
                    user.id,
                    user.email.value,
                    user.role.value,
                    self.config.get_access_token_secret(),
                    self.config.get_access_token_expiration_time(),
                    self.config.get_access_token_algorithm(),
                )
                refresh_token_value = self.token_service.generate_refresh_token(
                    self.config.get_refresh_token_secret(),
                    self.config.get_refresh_token_algorithm(),
                )

                refresh_token = RefreshToken.issue(
                    user_id=user.id,
                    token=refresh_token_value,
                    expires_at=utcnow() + timedelta(days=self.config.get_refresh_token_expiration_days()),
                    device_id=command.device_id,
                    user_agent=command.user_agent,
                    ip_address=command.ip_address,
                )
                await self.uow.refresh_tokens.save(refresh_token)
                await self.uow.commit()
        except InvalidCredentialsError:
            raise
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        log.info("success.auth.login_success", {"user_id": user.id, "duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.auth.user_logged_in",
            user.id,
            {
                "email": user.email.value,
                "device_id": command.device_id,
                "ip_address": command.ip_address,
                "user_agent": command.user_agent,
            },
        )

        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token_value,
            user=AuthenticatedUser(
                id=user.id,
                email=user.email.value,
                name=user.name,
                role=user.role,
            ),
            expires_in=self.config.get_access_token_expiration_time(),
        )

    async def _authenticate(self, command: LoginCommand) -> User:
        try:
            email = Email(command.email)
        except InvalidEmailFormatError:
            email = None

        user = await self.uow.users.find_by_email(email) if email is not None else None

        hashed_password = user.hashed_password if user and user.hashed_password else PLACEHOLDER_HASH
        password_valid = await self.password_service.verify(command.password, hashed_password)

        if user is None or user.hashed_password is None or not password_valid:
            raise InvalidCredentialsError()
        return user

    async def _revoke_existing_tokens(self, user_id: str, log: ILogger) -> None:
        try:
            log.debug("operations.auth.token_revocation")
            await self.uow.refresh_tokens.revoke_all_by_user_id(user_id, reason="new_login")
        except Exception as error:
            context: Dict[str, Any] = {"user_id": user_id, "error": str(error)}
            log.warn("warnings.auth.token_revocation_failed", context)
