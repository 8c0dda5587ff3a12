"""
User Onboarding Use Case

Creates a user, provisions a temporary password and sends the welcome email.

Failure semantics:
- user creation failure aborts everything
- temporary password failure aborts before any email is sent
- welcome email failure is downgraded to a warning and reported in the status
"""

import time
from typing import List

from src.app.exceptions import (
    ApplicationException,
    ExternalServiceError,
    PasswordGenerationError,
    WorkflowOrchestrationError,
)
from src.app.services.config_service import IConfigService
from src.app.services.email_service import IEmailService
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.password_generator import IPasswordGenerator
from src.app.services.password_service import IPasswordService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainException, UserNotFoundError

from .create_user_use_case import CreateUserUseCase
from .dtos import (
    CreateUserCommand,
    CreateUserResponse,
    OnboardingStatus,
    UserOnboardingCommand,
    UserOnboardingResponse,
)

WORKFLOW_NAME = "user_onboarding"


class UserOnboardingUseCase:
    def __init__(
        self,
        create_user_use_case: CreateUserUseCase,
        uow: UnitOfWork,
        password_generator: IPasswordGenerator,
        password_service: IPasswordService,
        email_service: IEmailService,
        config: IConfigService,
        logger: ILogger,
    ):
        self.create_user_use_case = create_user_use_case
        self.uow = uow
        self.password_generator = password_generator
        self.password_service = password_service
        self.email_service = email_service
        self.config = config
        self.logger = logger

    async def create_user_with_onboarding(self, command: UserOnboardingCommand) -> UserOnboardingResponse:
        started = time.perf_counter()
        log = self.logger.child(
            {
                "operation": "UserOnboarding",
                "requesting_user_id": command.requesting_user_id,
                "target_email": command.email,
            }
        )
        log.info("operations.onboarding.started", {"send_welcome_email": command.send_welcome_email})

        audit_events: List[str] = []
        password_generated = False
        email_sent = False

        try:
            # Step 1: create user (hard failure)
            created = await self.create_user_use_case.execute(
                CreateUserCommand(
                    email=command.email,
                    name=command.name,
                    role=command.role,
                    requesting_user_id=command.requesting_user_id,
                )
            )
            audit_events.append("user_created")

            if command.send_welcome_email:
                # Step 2: temporary password (hard failure)
                temporary_password = await self._provision_temporary_password(created, command, log)
                password_generated = True
                audit_events.append("password_generated")

                # Step 3: welcome email (soft failure)
                email_sent = await self._send_welcome_email(created, temporary_password, command, log)
                audit_events.append("email_sent" if email_sent else "email_failed")
        except (DomainException, ApplicationException) as error:
            log.error("operations.onboarding.failed", error, {"duration_ms": elapsed_ms(started)})
            raise
        except Exception as error:
            wrapped = WorkflowOrchestrationError(WORKFLOW_NAME, "unknown", str(error))
            log.error("operations.onboarding.failed", wrapped, {"duration_ms": elapsed_ms(started)})
            raise wrapped from error

        status = OnboardingStatus(
            password_generated=password_generated,
            email_sent=email_sent,
            audit_events=audit_events,
        )
        log.info(
            "operations.onboarding.completed",
            {"user_id": created.id, "status": status.model_dump(), "duration_ms": elapsed_ms(started)},
        )
        self.logger.audit(
            "audit.user_onboarding_process",
            command.requesting_user_id,
            {"target_user_id": created.id, "target_email": created.email, **status.model_dump()},
        )

        return UserOnboardingResponse(**created.model_dump(), onboarding_status=status)

    async def _provision_temporary_password(
        self, created: CreateUserResponse, command: UserOnboardingCommand, log: ILogger
    ) -> str:
        try:
            temporary_password = await self.password_generator.generate_temporary_password()
            hashed_password = await self.password_service.hash(temporary_password)

            async with self.uow:
                user = await self.uow.users.find_by_id(created.id)
                if user is None:
                    raise UserNotFoundError(created.id)
                await self.uow.users.update(user.with_password(hashed_password).require_password_change())
                await self.uow.commit()
        except Exception as error:
            log.error("operations.onboarding.password_generation_failed", error, {"user_id": created.id})
            raise PasswordGenerationError(str(error), {"user_id": created.id}) from error

        log.debug("operations.onboarding.password_generated", {"user_id": created.id})
        self.logger.audit("audit.password_generated", command.requesting_user_id, {"target_user_id": created.id})
        return temporary_password

    async def _send_welcome_email(
        self,
        created: CreateUserResponse,
        temporary_password: str,
        command: UserOnboardingCommand,
        log: ILogger,
    ) -> bool:
        try:
            await self.email_service.send_welcome_email(
                created.email,
                created.name,
                temporary_password,
                self.config.get_login_url(),
            )
        except Exception as error:
            failure = ExternalServiceError("email_service", "send_welcome_email", error)
            log.warn(
                "warnings.onboarding.welcome_email_failed",
                {"user_id": created.id, "code": failure.code, **failure.context},
            )
            return False

        self.logger.audit(
            "audit.welcome_email_sent",
            command.requesting_user_id,
            {"target_user_id": created.id, "target_email": created.email},
        )
        return True
