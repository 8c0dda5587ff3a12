"""
Get User Use Case

Loads a user's profile on behalf of a requesting user. The target profile is
read cache-aside: a cached payload is used when present, otherwise the user is
loaded from the database and cached. Cache failures fall back to the database.
"""

import time
from typing import Optional

from src.app.services.cache_service import ICacheService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Permission, User, UserRole
from src.domain.exceptions import InsufficientPermissionsError, UserNotFoundError

from .dtos import GetUserQuery, UserResponse


class GetUserUseCase:
    """
    Use case for viewing a user.

    Business Rules:
    - Anyone may view themself
    - USER role cannot view other users
    - Requesting user must hold VIEW_USER
    - MANAGER cannot view SUPER_ADMIN users
    - Each successful access is audited
    """

    def __init__(self, uow: UnitOfWork, logger: ILogger, cache: ICacheService):
        self.uow = uow
        self.cache = cache
        self.logger = logger

    async def execute(self, query: GetUserQuery) -> UserResponse:
        started = time.perf_counter()
        log = self.logger.child(
            {
                "operation": "GetUser",
                "requesting_user_id": query.requesting_user_id,
                "target_user_id": query.user_id,
            }
        )
        log.info("operations.user.retrieval_attempt")

        try:
            async with self.uow:
                log.debug("operations.user.validation_process")
                requesting_user = await self.uow.users.find_by_id(query.requesting_user_id)
                if requesting_user is None:
                    log.warn("warnings.user.not_found")
                    raise UserNotFoundError(query.requesting_user_id)

                log.debug("operations.user.target_lookup")
                target = await self._load_target(query.user_id, log)
                if target is None:
                    log.warn("warnings.user.target_not_found")
                    raise UserNotFoundError(query.user_id)

                log.debug("operations.permission.check")
                self._validate_view_permissions(requesting_user, target, log)
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        log.info("success.user.retrieval_success", {"duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.user.accessed",
            query.requesting_user_id,
            {
                "target_user_id": target.id,
                "target_email": target.email,
                "target_role": target.role.value,
            },
        )
        return target

    async def _load_target(self, user_id: str, log: ILogger) -> Optional[UserResponse]:
        cached = await self._read_cache(user_id, log)
        if cached is not None:
            log.debug("infrastructure.cache.user_cache_hit")
            return cached

        user = await self.uow.users.find_by_id(user_id)
        if user is None:
            return None

        response = UserResponse.from_user(user)
        await self._write_cache(response, log)
        return response

    async def _read_cache(self, user_id: str, log: ILogger) -> Optional[UserResponse]:
        try:
            payload = await self.cache.get_user(user_id)
            return UserResponse.model_validate(payload) if payload is not None else None
        except Exception as error:
            log.warn("infrastructure.cache.user_cache_read_failed", {"cache_error": str(error)})
            return None

    async def _write_cache(self, response: UserResponse, log: ILogger) -> None:
        try:
            await self.cache.set_user(response.id, response.model_dump(mode="json"))
        except Exception as error:
            log.warn("infrastructure.cache.user_cache_write_failed", {"cache_error": str(error)})

    def _validate_view_permissions(self, requesting_user: User, target: UserResponse, log: ILogger) -> None:
        if requesting_user.id == target.id:
            return

        denied_context = {
            "requesting_user_role": requesting_user.role.value,
            "required_permission": Permission.VIEW_USER.value,
        }
        if requesting_user.is_regular_user() or not requesting_user.has_permission(Permission.VIEW_USER):
            log.warn("warnings.permission.denied", denied_context)
            raise InsufficientPermissionsError(Permission.VIEW_USER.value, requesting_user.role.value)

        if requesting_user.is_manager() and target.role == UserRole.SUPER_ADMIN:
            log.warn("warnings.permission.admin_access_denied", {"target_role": target.role.value})
            raise InsufficientPermissionsError(Permission.VIEW_USER.value, requesting_user.role.value)
