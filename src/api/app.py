from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, status_for_code
from src.adapter.services.logger import configure_logging
from src.app.exceptions import ApplicationException
from src.depends import get_i18n_service
from src.domain.exceptions import DomainException
import logging

logger = logging.getLogger(__name__)


def request_language(request: Request) -> Optional[str]:
    header = request.headers.get("accept-language", "")
    return header.split(",")[0].split("-")[0].strip().lower() or None


def error_response(request: Request, status_code: int, code: str, message_key: str) -> JSONResponse:
    message = get_i18n_service().translate(message_key, request_language(request))
    error_dict = {"code": code, "message": message}
    return JSONResponse(status_code=status_code, content={"error": error_dict})


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error: {exc.code}")
    return error_response(request, exc.status_code, exc.code, exc.message)


async def handle_domain_error(request: Request, exc: DomainException):
    status_code = status_for_code(exc.code)
    logger.warning(f"Domain error: {exc.code}")
    return error_response(request, status_code, exc.code, exc.message)


async def handle_application_error(request: Request, exc: ApplicationException):
    status_code = status_for_code(exc.code)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Server error: {exc.code} {exc.context}")
        return error_response(request, status_code, exc.code, "errors.internal")
    logger.warning(f"Application error: {exc.code}")
    return error_response(request, status_code, exc.code, exc.message)


def create_app(ApplicationConfig) -> FastAPI:
    configure_logging(ApplicationConfig.LOG_LEVEL)

    app = FastAPI(title="User Management API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check, password_reset, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(user.router, tags=["User"])
    app.include_router(password_reset.router, tags=["Password Reset"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(DomainException, handle_domain_error)
    app.add_exception_handler(ApplicationException, handle_application_error)

    return app
