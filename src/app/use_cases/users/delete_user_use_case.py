"""
Delete User Use Case

Physically removes a user after authorization and cache invalidation.
"""

import time

from src.app.exceptions import CacheInvalidationError
from src.app.services.cache_service import ICacheService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Permission, User
from src.domain.exceptions import InsufficientPermissionsError, SelfDeletionError, UserNotFoundError

from .dtos import DeleteUserCommand, DeleteUserResponse


class DeleteUserUseCase:
    """
    Use case for deleting a user.

    Business Rules:
    - Self-deletion is always forbidden
    - Requesting user must hold DELETE_USER
    - MANAGER cannot delete MANAGER or SUPER_ADMIN users
    - Cache entry for the target is invalidated before the delete;
      if that fails nothing is deleted
    """

    def __init__(self, uow: UnitOfWork, logger: ILogger, cache: ICacheService):
        self.uow = uow
        self.logger = logger
        self.cache = cache

    async def execute(self, command: DeleteUserCommand) -> DeleteUserResponse:
        started = time.perf_counter()
        log = self.logger.child(
            {
                "operation": "DeleteUser",
                "requesting_user_id": command.requesting_user_id,
                "target_user_id": command.user_id,
            }
        )
        log.info("operations.user.deletion_attempt")

        try:
            if command.requesting_user_id == command.user_id:
                log.warn("warnings.user.self_deletion_attempt")
                raise SelfDeletionError(command.user_id)

            async with self.uow:
                requesting_user = await self.uow.users.find_by_id(command.requesting_user_id)
                if requesting_user is None:
                    log.warn("warnings.user.not_found")
                    raise UserNotFoundError(command.requesting_user_id)

                target_user = await self.uow.users.find_by_id(command.user_id)
                if target_user is None:
                    log.warn("warnings.user.target_not_found")
                    raise UserNotFoundError(command.user_id)

                self._validate_permissions(requesting_user, target_user, log)

                await self._invalidate_cache(target_user.id, log)

                await self.uow.users.delete(target_user.id)
                await self.uow.commit()
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        deleted_at = utcnow()
        log.info("success.user.deletion_success", {"duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.user.deleted",
            command.requesting_user_id,
            {
                "target_user_id": target_user.id,
                "target_email": target_user.email.value,
                "target_role": target_user.role.value,
            },
        )

        return DeleteUserResponse(success=True, deleted_user_id=target_user.id, deleted_at=deleted_at)

    def _validate_permissions(self, requesting_user: User, target_user: User, log: ILogger) -> None:
        if not requesting_user.has_permission(Permission.DELETE_USER):
            log.warn(
                "warnings.permission.denied",
                {
                    "requesting_user_role": requesting_user.role.value,
                    "required_permission": Permission.DELETE_USER.value,
                },
            )
            raise InsufficientPermissionsError(Permission.DELETE_USER.value, requesting_user.role.value)

        if requesting_user.is_manager() and (target_user.is_manager() or target_user.is_super_admin()):
            log.warn(
                "warnings.permission.denied",
                {"reason": "manager_cannot_delete_manager_or_admin", "target_role": target_user.role.value},
            )
            raise InsufficientPermissionsError(Permission.DELETE_USER.value, requesting_user.role.value)

    async def _invalidate_cache(self, user_id: str, log: ILogger) -> None:
        try:
            await self.cache.invalidate_user_cache(user_id)
        except Exception as error:
            log.error("infrastructure.cache.user_cache_invalidation_failed", error)
            raise CacheInvalidationError(user_id, str(error)) from error
        log.debug("infrastructure.cache.user_cache_invalidated", {"invalidated_user_id": user_id})
