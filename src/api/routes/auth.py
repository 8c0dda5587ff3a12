from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.app.services.config_service import IConfigService
from src.app.services.logger import ILogger
from src.app.services.password_service import IPasswordService
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    LogoutCommand,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenCommand,
    RefreshTokenResponse,
    RefreshTokenUseCase,
)
from src.depends import (
    get_config_service,
    get_logger,
    get_password_service,
    get_token_service,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    device_id: Optional[str] = Field(default=None, max_length=255)


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_service: IPasswordService = Depends(get_password_service),
    token_service: ITokenService = Depends(get_token_service),
    config: IConfigService = Depends(get_config_service),
    logger: ILogger = Depends(get_logger),
):
    """
    User Login

    Authenticates user and returns an access token and a refresh token.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = LoginCommand(
        email=request.email,
        password=request.password,
        device_id=request.device_id,
        user_agent=http_request.headers.get("user-agent"),
        ip_address=client_ip(http_request),
    )
    use_case = LoginUseCase(uow, password_service, token_service, config, logger)
    return await use_case.execute(command)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)
    device_id: Optional[str] = Field(default=None, max_length=255)


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: ITokenService = Depends(get_token_service),
    config: IConfigService = Depends(get_config_service),
    logger: ILogger = Depends(get_logger),
):
    """
    Refresh Access Token

    Rotates the refresh token: the presented token is revoked and a new pair returned.

    Raises:
        - 401 Unauthorized: Unknown, revoked or expired refresh token
        - 404 Not Found: Token owner no longer exists
    """
    command = RefreshTokenCommand(
        refresh_token=request.refresh_token,
        device_id=request.device_id,
        user_agent=http_request.headers.get("user-agent"),
        ip_address=client_ip(http_request),
    )
    use_case = RefreshTokenUseCase(uow, token_service, config, logger)
    return await use_case.execute(command)


class LogoutRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)
    logout_all: bool = False


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: LogoutRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    logger: ILogger = Depends(get_logger),
):
    """
    Logout

    Revokes the refresh token, or every refresh token of the user with logout_all.
    """
    use_case = LogoutUseCase(uow, logger)
    return await use_case.execute(LogoutCommand(refresh_token=request.refresh_token, logout_all=request.logout_all))
