"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair, rotating the refresh token.
"""

import time
from datetime import timedelta

from src.app.services.config_service import IConfigService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RefreshToken
from src.domain.exceptions import InvalidRefreshTokenError, TokenExpiredError, UserNotFoundError

from .dtos import RefreshTokenCommand, RefreshTokenResponse


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh token rotation: old token revoked, new token issued
    - Unknown or revoked token is rejected
    - Expired token is rejected
    - Token owner must still exist
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: ITokenService,
        config: IConfigService,
        logger: ILogger,
    ):
        self.uow = uow
        self.token_service = token_service
        self.config = config
        self.logger = logger

    async def execute(self, command: RefreshTokenCommand) -> RefreshTokenResponse:
        started = time.perf_counter()
        log = self.logger.child({"operation": "RefreshToken", "device_id": command.device_id})
        log.info("operations.auth.token_refresh_attempt")

        try:
            async with self.uow:
                current = await self.uow.refresh_tokens.find_by_token(command.refresh_token)
                if current is None:
                    log.warn("warnings.auth.refresh_token_not_found")
                    raise InvalidRefreshTokenError("not_found")

                if current.is_revoked:
                    log.warn("warnings.auth.refresh_token_revoked", {"token_id": current.id})
                    raise InvalidRefreshTokenError("revoked")

                if current.is_expired():
                    log.warn("warnings.auth.refresh_token_expired", {"token_id": current.id})
                    raise TokenExpiredError(current.user_id)

                user = await self.uow.users.find_by_id(current.user_id)
                if user is None:
                    log.warn("warnings.user.not_found", {"user_id": current.user_id})
                    raise UserNotFoundError(current.user_id)

                if not await self.uow.refresh_tokens.revoke_by_token(command.refresh_token, "token_refreshed"):
                    log.warn("warnings.auth.refresh_token_already_rotated", {"token_id": current.id})
                    raise InvalidRefreshTokenError("revoked")

                access_token = self.token_service.generate_access_token(
                    user.id,
                    user.email.value,
                    user.role.value,
                    self.config.get_access_token_secret(),
                    self.config.get_access_token_expiration_time(),
                    self.config.get_access_token_algorithm(),
                )
                new_refresh_token = self.token_service.generate_refresh_token(
                    self.config.get_refresh_token_secret(),
                    self.config.get_refresh_token_algorithm(),
                )
                await self.uow.refresh_tokens.save(
                    RefreshToken.issue(
                        user_id=user.id,
                        token=new_refresh_token,
                        expires_at=utcnow() + timedelta(days=self.config.get_refresh_token_expiration_days()),
                        device_id=command.device_id or current.device_id,
                        user_agent=command.user_agent or current.user_agent,
                        ip_address=command.ip_address or current.ip_address,
                    )
                )
                await self.uow.commit()
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        log.info("success.auth.token_refreshed", {"user_id": user.id, "duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.auth.token_refreshed",
            user.id,
            {"previous_token_id": current.id, "device_id": command.device_id},
        )

        return RefreshTokenResponse(
            access_token=access_token,
            refresh_token=new_refresh_token,
            expires_in=self.config.get_access_token_expiration_time(),
        )
