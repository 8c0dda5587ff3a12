"""
Update User Use Case

Handles profile and role changes.
"""

import time
from typing import Any, Dict, Optional

from src.app.repositories.user_repository import DuplicateKeyError
from src.app.services.cache_service import ICacheService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Permission, User, UserRole
from src.domain.entities.user import MAX_NAME_LENGTH
from src.domain.exceptions import (
    EmailAlreadyExistsError,
    InsufficientPermissionsError,
    InvalidEmailFormatError,
    InvalidNameError,
    RoleElevationError,
    UserNotFoundError,
)
from src.domain.value_objects import Email

from .dtos import UpdateUserCommand, UpdateUserResponse


class UpdateUserUseCase:
    """
    Use case for updating a user.

    Business Rules:
    - Self-update may change name and email, never role
    - Updating others requires UPDATE_USER and a role other than USER
    - MANAGER cannot promote anyone to MANAGER or SUPER_ADMIN
    - MANAGER cannot modify MANAGER or SUPER_ADMIN users
    - Email uniqueness is only checked when the email actually changes
    - The whole aggregate is replaced; id and created_at are preserved
    - Cache invalidation failures are logged, not raised
    """

    def __init__(self, uow: UnitOfWork, logger: ILogger, cache: ICacheService):
        self.uow = uow
        self.logger = logger
        self.cache = cache

    async def execute(self, command: UpdateUserCommand) -> UpdateUserResponse:
        started = time.perf_counter()
        log = self.logger.child(
            {
                "operation": "UpdateUser",
                "requesting_user_id": command.requesting_user_id,
                "target_user_id": command.user_id,
            }
        )
        log.info(
            "operations.user.update_attempt",
            {"updates": command.model_dump(include={"email", "name", "role"}, exclude_none=True)},
        )

        try:
            async with self.uow:
                requesting_user = await self.uow.users.find_by_id(command.requesting_user_id)
                if requesting_user is None:
                    log.warn("warnings.user.not_found")
                    raise UserNotFoundError(command.requesting_user_id)

                target_user = await self.uow.users.find_by_id(command.user_id)
                if target_user is None:
                    log.warn("warnings.user.target_not_found")
                    raise UserNotFoundError(command.user_id)

                self._validate_permissions(requesting_user, target_user, command.role, log)

                changes = await self._validate_input(command, target_user, log)
                updated_user = target_user.with_changes(**changes)

                try:
                    saved_user = await self.uow.users.update(updated_user)
                except DuplicateKeyError:
                    log.warn("warnings.email.already_exists", {"email": updated_user.email.value})
                    raise EmailAlreadyExistsError(updated_user.email.value)

                await self.uow.commit()
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        await self._invalidate_cache(saved_user.id, log)

        log.info("success.user.update_success", {"duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.user.updated",
            command.requesting_user_id,
            {
                "target_user_id": saved_user.id,
                "target_email": saved_user.email.value,
                "changes": _describe_changes(changes),
            },
        )

        return UpdateUserResponse(
            id=saved_user.id,
            email=saved_user.email.value,
            name=saved_user.name,
            role=saved_user.role,
            updated_at=saved_user.updated_at,
        )

    def _validate_permissions(
        self,
        requesting_user: User,
        target_user: User,
        new_role: Optional[UserRole],
        log: ILogger,
    ) -> None:
        if requesting_user.id == target_user.id:
            if new_role is not None:
                log.warn("warnings.permission.denied", {"reason": "self_role_change_forbidden"})
                raise InsufficientPermissionsError("CHANGE_OWN_ROLE", requesting_user.role.value)
            return

        if not requesting_user.has_permission(Permission.UPDATE_USER) or requesting_user.is_regular_user():
            log.warn(
                "warnings.permission.denied",
                {
                    "requesting_user_role": requesting_user.role.value,
                    "required_permission": Permission.UPDATE_USER.value,
                    "reason": "regular_user_cannot_update_others",
                },
            )
            raise InsufficientPermissionsError(Permission.UPDATE_USER.value, requesting_user.role.value)

        if new_role is not None and requesting_user.is_manager():
            if new_role in (UserRole.MANAGER, UserRole.SUPER_ADMIN):
                log.warn(
                    "warnings.role.elevation_attempt",
                    {"current_role": target_user.role.value, "new_role": UserRole(new_role).value},
                )
                raise RoleElevationError(requesting_user.role.value, UserRole(new_role).value)

        if requesting_user.is_manager() and (target_user.is_manager() or target_user.is_super_admin()):
            log.warn(
                "warnings.permission.denied",
                {"reason": "manager_cannot_modify_manager_or_admin", "target_role": target_user.role.value},
            )
            raise InsufficientPermissionsError("MODIFY_MANAGER_OR_ADMIN", requesting_user.role.value)

    async def _validate_input(self, command: UpdateUserCommand, target_user: User, log: ILogger) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}

        if command.name is not None:
            if not command.name.strip():
                log.warn("operations.validation.failed", {"field": "name", "reason": "empty"})
                raise InvalidNameError(command.name, reason="empty")
            if len(command.name.strip()) > MAX_NAME_LENGTH:
                log.warn("operations.validation.failed", {"field": "name", "reason": "too_long"})
                raise InvalidNameError(command.name, reason="too_long")
            changes["name"] = command.name.strip()

        if command.email is not None:
            try:
                email = Email(command.email)
            except InvalidEmailFormatError:
                log.warn("warnings.email.invalid_format", {"email": command.email})
                raise

            if email != target_user.email:
                if await self.uow.users.find_by_email(email) is not None:
                    log.warn("warnings.email.already_exists", {"email": email.value})
                    raise EmailAlreadyExistsError(email.value)
            changes["email"] = email

        if command.role is not None:
            changes["role"] = UserRole(command.role)

        return changes

    async def _invalidate_cache(self, user_id: str, log: ILogger) -> None:
        try:
            await self.cache.invalidate_user_cache(user_id)
            log.debug("infrastructure.cache.user_cache_invalidated", {"invalidated_user_id": user_id})
        except Exception as error:
            log.warn("infrastructure.cache.user_cache_invalidation_failed", {"cache_error": str(error)})


def _describe_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    described = {}
    for key, value in changes.items():
        if isinstance(value, Email):
            described[key] = value.value
        elif isinstance(value, UserRole):
            described[key] = value.value
        else:
            described[key] = value
    return described
