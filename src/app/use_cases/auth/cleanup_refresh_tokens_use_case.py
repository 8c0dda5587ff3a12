"""
Cleanup Refresh Tokens Use Case

Purges refresh tokens that can no longer be used.
"""

import time

from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork

from .dtos import CleanupExpiredTokensResponse


class CleanupRefreshTokensUseCase:
    """Deletes expired and revoked refresh tokens; meant for scheduled maintenance"""

    def __init__(self, uow: UnitOfWork, logger: ILogger):
        self.uow = uow
        self.logger = logger

    async def execute(self) -> CleanupExpiredTokensResponse:
        started = time.perf_counter()
        log = self.logger.child({"operation": "CleanupRefreshTokens"})

        try:
            async with self.uow:
                deleted_count = await self.uow.refresh_tokens.delete_expired()
                await self.uow.commit()
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        log.info(
            "operations.auth.refresh_token_cleanup",
            {"deleted_count": deleted_count, "duration_ms": elapsed_ms(started)},
        )
        return CleanupExpiredTokensResponse(deleted_count=deleted_count)
