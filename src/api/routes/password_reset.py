from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError
from src.app.services.cache_service import ICacheService
from src.app.services.config_service import IConfigService
from src.app.services.email_service import IEmailService
from src.app.services.logger import ILogger
from src.app.services.password_generator import IPasswordGenerator
from src.app.services.password_service import IPasswordService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ConfirmPasswordResetCommand,
    ConfirmPasswordResetResponse,
    InitiatePasswordResetCommand,
    InitiatePasswordResetResponse,
    PasswordResetUseCase,
    ValidateResetTokenResponse,
)
from src.depends import (
    get_cache_service,
    get_config_service,
    get_email_service,
    get_logger,
    get_password_generator,
    get_password_service,
    get_unit_of_work,
)

router = APIRouter(prefix="/password-reset", tags=["Password Reset"])


async def get_password_reset_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_generator: IPasswordGenerator = Depends(get_password_generator),
    password_service: IPasswordService = Depends(get_password_service),
    email_service: IEmailService = Depends(get_email_service),
    config: IConfigService = Depends(get_config_service),
    logger: ILogger = Depends(get_logger),
    cache: ICacheService = Depends(get_cache_service),
) -> PasswordResetUseCase:
    return PasswordResetUseCase(uow, password_generator, password_service, email_service, config, logger, cache)


class PasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")


@router.post("/request", status_code=status.HTTP_200_OK, response_model=InitiatePasswordResetResponse)
async def request_password_reset(
    request: PasswordResetRequest,
    use_case: PasswordResetUseCase = Depends(get_password_reset_use_case),
):
    """
    Request Password Reset

    Always answers the same way so registered emails cannot be enumerated.
    """
    return await use_case.initiate_password_reset(InitiatePasswordResetCommand(email=request.email))


@router.get("/validate", status_code=status.HTTP_200_OK, response_model=ValidateResetTokenResponse)
async def validate_reset_token(
    token: str = Query(..., min_length=1),
    use_case: PasswordResetUseCase = Depends(get_password_reset_use_case),
):
    return await use_case.validate_reset_token(token)


class ConfirmPasswordResetRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., description="At least 8 chars with upper, lower and digit")


@router.post("/confirm", status_code=status.HTTP_200_OK, response_model=ConfirmPasswordResetResponse)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    use_case: PasswordResetUseCase = Depends(get_password_reset_use_case),
):
    """
    Confirm Password Reset

    Raises:
        - 400 Bad Request: Invalid or expired token, or weak password
    """
    result = await use_case.confirm_password_reset(
        ConfirmPasswordResetCommand(token=request.token, new_password=request.new_password)
    )
    if not result.success:
        raise ClientError("PASSWORD_RESET_FAILED", result.error, status.HTTP_400_BAD_REQUEST)
    return result
