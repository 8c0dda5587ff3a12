"""
Create User Use Case

Handles creation of a user by an authorized actor.
"""

import time

from src.app.exceptions import ApplicationException, UseCaseExecutionError
from src.app.repositories.user_repository import DuplicateKeyError
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Permission, User, UserRole
from src.domain.entities.user import MAX_NAME_LENGTH
from src.domain.exceptions import (
    DomainException,
    EmailAlreadyExistsError,
    InsufficientPermissionsError,
    InvalidEmailFormatError,
    InvalidNameError,
    RoleElevationError,
    UserNotFoundError,
)
from src.domain.value_objects import Email

from .dtos import CreateUserCommand, CreateUserResponse


class CreateUserUseCase:
    """
    Use case for creating a user.

    Business Rules:
    - Requesting user must exist
    - Requesting user must hold CREATE_USER
    - MANAGER cannot create MANAGER or SUPER_ADMIN users
    - Name is 1-100 characters after trimming
    - Email must be well-formed and not already registered
    - Audit event recorded on success only
    """

    def __init__(self, uow: UnitOfWork, logger: ILogger):
        self.uow = uow
        self.logger = logger

    async def execute(self, command: CreateUserCommand) -> CreateUserResponse:
        """
        Execute create user use case.

        Args:
            command: CreateUserCommand with target email/name/role and actor id

        Returns:
            CreateUserResponse with the normalized email

        Raises:
            UserNotFoundError, InsufficientPermissionsError, RoleElevationError,
            InvalidNameError, InvalidEmailFormatError, EmailAlreadyExistsError,
            UseCaseExecutionError for unexpected failures
        """
        started = time.perf_counter()
        log = self.logger.child(
            {
                "operation": "CreateUser",
                "requesting_user_id": command.requesting_user_id,
                "target_email": command.email,
            }
        )
        log.info("operations.user.creation_attempt")

        try:
            async with self.uow:
                log.debug("operations.user.validation_process")
                requesting_user = await self.uow.users.find_by_id(command.requesting_user_id)
                if requesting_user is None:
                    log.warn("warnings.user.not_found")
                    raise UserNotFoundError(command.requesting_user_id)

                log.debug("operations.permission.check")
                self._validate_permissions(requesting_user, command.role, log)

                name = self._validate_name(command.name, log)
                email = self._parse_email(command.email, log)

                if await self.uow.users.find_by_email(email) is not None:
                    log.warn("warnings.email.already_exists", {"email": email.value})
                    raise EmailAlreadyExistsError(email.value)

                user = User.create(email, name, command.role)
                try:
                    user = await self.uow.users.save(user)
                except DuplicateKeyError:
                    # Concurrent creation won the unique-email race
                    log.warn("warnings.email.already_exists", {"email": email.value})
                    raise EmailAlreadyExistsError(email.value)

                await self.uow.commit()
        except (DomainException, ApplicationException) as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise
        except Exception as error:
            wrapped = UseCaseExecutionError("CreateUser", str(error), error)
            log.error("operations.failed", wrapped, {"duration_ms": elapsed_ms(started)})
            raise wrapped from error

        log.info("success.user.created", {"user_id": user.id, "duration_ms": elapsed_ms(started)})
        self.logger.audit(
            "audit.user.created",
            command.requesting_user_id,
            {
                "target_user_id": user.id,
                "target_email": user.email.value,
                "target_role": user.role.value,
            },
        )

        return CreateUserResponse(
            id=user.id,
            email=user.email.value,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
        )

    def _validate_permissions(self, requesting_user: User, target_role: UserRole, log: ILogger) -> None:
        if not requesting_user.has_permission(Permission.CREATE_USER):
            log.warn(
                "warnings.permission.denied",
                {
                    "requesting_user_role": requesting_user.role.value,
                    "required_permission": Permission.CREATE_USER.value,
                },
            )
            raise InsufficientPermissionsError(Permission.CREATE_USER.value, requesting_user.role.value)

        if requesting_user.is_manager() and target_role in (UserRole.MANAGER, UserRole.SUPER_ADMIN):
            log.warn("warnings.role.elevation_attempt", {"target_role": UserRole(target_role).value})
            raise RoleElevationError(requesting_user.role.value, UserRole(target_role).value)

    def _validate_name(self, name: str, log: ILogger) -> str:
        if name is None or not name.strip():
            log.warn("operations.validation.failed", {"field": "name", "reason": "empty"})
            raise InvalidNameError(name, reason="empty")
        if len(name.strip()) > MAX_NAME_LENGTH:
            log.warn("operations.validation.failed", {"field": "name", "reason": "too_long"})
            raise InvalidNameError(name, reason="too_long")
        return name.strip()

    def _parse_email(self, raw_email: str, log: ILogger) -> Email:
        try:
            return Email(raw_email)
        except InvalidEmailFormatError:
            log.warn("warnings.email.invalid_format", {"email": raw_email})
            raise
