"""
Password Reset Use Case

Request, validate and confirm password resets.

The request step never reveals whether an email is registered: unknown
emails and email delivery failures both report the same success.
"""

import time
from datetime import timedelta

from src.app.services.cache_service import ICacheService
from src.app.services.config_service import IConfigService
from src.app.services.email_service import IEmailService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.password_generator import IPasswordGenerator
from src.app.services.password_service import IPasswordService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordResetToken
from src.domain.exceptions import InvalidEmailFormatError
from src.domain.value_objects import Email

from .dtos import (
    CleanupExpiredTokensResponse,
    ConfirmPasswordResetCommand,
    ConfirmPasswordResetResponse,
    InitiatePasswordResetCommand,
    InitiatePasswordResetResponse,
    ValidateResetTokenResponse,
)

RESET_REQUESTED_MESSAGE = "success.password_reset.requested"
RESET_COMPLETED_MESSAGE = "success.password_reset.completed"


class PasswordResetUseCase:
    """
    Use case for the password reset flow.

    Business Rules:
    - One active reset token per user; older tokens are deleted on request
    - Requests always get the same generic answer, whether or not they succeed
    - Tokens expire after the configured validity window (1 hour by default)
    - New password must be at least 8 characters with upper, lower and digit
    - Confirmation sets the new password, clears the password-change flag,
      consumes the token, revokes every refresh token of the user and drops
      the cached profile
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_generator: IPasswordGenerator,
        password_service: IPasswordService,
        email_service: IEmailService,
        config: IConfigService,
        logger: ILogger,
        cache: ICacheService,
    ):
        self.uow = uow
        self.password_generator = password_generator
        self.password_service = password_service
        self.email_service = email_service
        self.config = config
        self.logger = logger
        self.cache = cache

    async def initiate_password_reset(self, command: InitiatePasswordResetCommand) -> InitiatePasswordResetResponse:
        started = time.perf_counter()
        log = self.logger.child({"operation": "InitiatePasswordReset"})
        log.info("operations.password_reset.request_attempt")
        response = InitiatePasswordResetResponse(success=True, message=RESET_REQUESTED_MESSAGE)

        try:
            email = Email(command.email)
        except InvalidEmailFormatError:
            log.warn("warnings.email.invalid_format")
            return response

        try:
            async with self.uow:
                user = await self.uow.users.find_by_email(email)
                if user is None:
                    log.info("operations.password_reset.unknown_email", {"duration_ms": elapsed_ms(started)})
                    return response

                await self.uow.password_reset_tokens.delete_by_user_id(user.id)

                token_value = await self.password_generator.generate_reset_token()
                validity = timedelta(hours=self.config.get_password_reset_token_validity_hours())
                reset_token = PasswordResetToken.create(user.id, token_value, validity)
                await self.uow.password_reset_tokens.save(reset_token)
                await self.uow.commit()
        except Exception as error:
            # Same answer as for an unknown address
            log.error("operations.password_reset.request_failed", error, {"duration_ms": elapsed_ms(started)})
            return response

        try:
            await self.email_service.send_password_reset_email(
                user.email.value,
                user.name,
                token_value,
                self.config.get_password_reset_url(),
            )
        except Exception as error:
            log.warn("warnings.password_reset.email_failed", {"user_id": user.id, "error": str(error)})

        log.info("success.password_reset.requested", {"user_id": user.id, "duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.password_reset.requested",
            user.id,
            {"email": user.email.value, "expires_at": reset_token.expires_at.isoformat()},
        )
        return response

    async def validate_reset_token(self, token: str) -> ValidateResetTokenResponse:
        async with self.uow:
            reset_token = await self.uow.password_reset_tokens.find_by_token(token)

        if reset_token is None:
            return ValidateResetTokenResponse(is_valid=False, reason="errors.password_reset.token_not_found")
        if reset_token.is_expired():
            return ValidateResetTokenResponse(is_valid=False, reason="errors.password_reset.token_expired")

        return ValidateResetTokenResponse(
            is_valid=True,
            user_id=reset_token.user_id,
            expires_at=reset_token.expires_at,
        )

    async def confirm_password_reset(self, command: ConfirmPasswordResetCommand) -> ConfirmPasswordResetResponse:
        started = time.perf_counter()
        log = self.logger.child({"operation": "ConfirmPasswordReset"})
        log.info("operations.password_reset.confirm_attempt")

        validation = await self.validate_reset_token(command.token)
        if not validation.is_valid:
            log.warn("warnings.password_reset.invalid_token", {"reason": validation.reason})
            return ConfirmPasswordResetResponse(success=False, error=validation.reason)

        strength = self.password_generator.validate_password_strength(command.new_password)
        if not strength.is_valid:
            log.warn("warnings.password_reset.weak_password", {"feedback": strength.feedback})
            return ConfirmPasswordResetResponse(
                success=False,
                error="errors.password_reset.weak_password",
                feedback=strength.feedback,
            )

        hashed_password = await self.password_service.hash(command.new_password)

        async with self.uow:
            user = await self.uow.users.find_by_id(validation.user_id)
            if user is None:
                log.warn("warnings.user.not_found", {"user_id": validation.user_id})
                return ConfirmPasswordResetResponse(success=False, error="errors.user.not_found")

            updated_user = user.with_password(hashed_password).clear_password_change_requirement()
            await self.uow.users.update(updated_user)
            await self.uow.password_reset_tokens.delete_by_user_id(user.id)
            revoked_count = await self.uow.refresh_tokens.revoke_all_by_user_id(user.id, reason="password_reset")
            await self.uow.commit()

        try:
            await self.cache.invalidate_user_cache(user.id)
        except Exception as error:
            log.warn("infrastructure.cache.user_cache_invalidation_failed", {"cache_error": str(error)})

        log.info(
            "success.password_reset.completed",
            {"user_id": user.id, "sessions_revoked": revoked_count, "duration_ms": elapsed_ms(started)},
        )
        self.logger.audit(
            "audit.password_reset.completed",
            user.id,
            {"sessions_revoked": revoked_count},
        )
        return ConfirmPasswordResetResponse(success=True, message=RESET_COMPLETED_MESSAGE)

    async def cleanup_expired_tokens(self) -> CleanupExpiredTokensResponse:
        async with self.uow:
            deleted_count = await self.uow.password_reset_tokens.delete_expired_tokens()
            await self.uow.commit()

        self.logger.info("operations.password_reset.cleanup", {"deleted_count": deleted_count})
        return CleanupExpiredTokensResponse(deleted_count=deleted_count)
