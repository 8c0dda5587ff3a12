"""
Logout Use Case

Revokes a refresh token, or every refresh token of its owner.
"""

import time

from src.app.exceptions import UseCaseExecutionError
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import InvalidRefreshTokenError

from .dtos import LogoutCommand, LogoutResponse


class LogoutUseCase:
    """
    Use case for logging out.

    Business Rules:
    - Presented token must be known
    - Single-token revocation failures are logged and logout still succeeds
    - Logout from all devices fails loudly if the bulk revocation fails
    """

    def __init__(self, uow: UnitOfWork, logger: ILogger):
        self.uow = uow
        self.logger = logger

    async def execute(self, command: LogoutCommand) -> LogoutResponse:
        started = time.perf_counter()
        log = self.logger.child({"operation": "Logout", "logout_all": command.logout_all})
        log.info("operations.auth.logout_attempt")

        try:
            async with self.uow:
                token = await self.uow.refresh_tokens.find_by_token(command.refresh_token)
                if token is None:
                    log.warn("warnings.auth.refresh_token_not_found")
                    raise InvalidRefreshTokenError("not_found")

                if command.logout_all:
                    try:
                        revoked_count = await self.uow.refresh_tokens.revoke_all_by_user_id(
                            token.user_id, reason="logout_all"
                        )
                    except Exception as error:
                        raise UseCaseExecutionError("Logout", str(error), error) from error
                else:
                    revoked_count = await self._revoke_single(command.refresh_token, log)

                await self.uow.commit()
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        log.info("success.auth.logout_success", {"revoked_count": revoked_count, "duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.auth.user_logged_out",
            token.user_id,
            {"logout_all": command.logout_all, "revoked_count": revoked_count},
        )
        return LogoutResponse(success=True, revoked_count=revoked_count)

    async def _revoke_single(self, refresh_token: str, log: ILogger) -> int:
        try:
            revoked = await self.uow.refresh_tokens.revoke_by_token(refresh_token, "logout")
        except Exception as error:
            log.warn("warnings.auth.token_revocation_failed", {"error": str(error)})
            return 0
        return 1 if revoked else 0
