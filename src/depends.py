from functools import lru_cache

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.cache_service import InMemoryUserCacheService, RedisUserCacheService
from src.adapter.services.config_service import ApplicationConfigService
from src.adapter.services.email_service import ConsoleEmailService
from src.adapter.services.i18n_service import YamlI18nService
from src.adapter.services.logger import StructuredLogger
from src.adapter.services.password_generator import SecretsPasswordGenerator
from src.adapter.services.password_service import BcryptPasswordService
from src.adapter.services.token_service import JoseTokenService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.exceptions import ApplicationAuthorizationError, DependencyInjectionError
from src.app.services.cache_service import ICacheService
from src.app.services.config_service import IConfigService
from src.app.services.email_service import IEmailService
from src.app.services.i18n_service import II18nService
from src.app.services.logger import ILogger
from src.app.services.password_generator import IPasswordGenerator
from src.app.services.password_service import IPasswordService
from src.app.services.token_service import ITokenService
from src.domain.entities import UserRole


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless the pragma is set per connection"""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


# Process-wide services


@lru_cache
def get_logger() -> ILogger:
    return StructuredLogger("src")


@lru_cache
def get_config_service() -> IConfigService:
    return ApplicationConfigService(ApplicationConfig)


@lru_cache
def get_i18n_service() -> II18nService:
    return YamlI18nService(ApplicationConfig.DEFAULT_LANGUAGE)


@lru_cache
def get_password_service() -> IPasswordService:
    return BcryptPasswordService(int(ApplicationConfig.BCRYPT_ROUNDS))


@lru_cache
def get_token_service() -> ITokenService:
    return JoseTokenService()


@lru_cache
def get_password_generator() -> IPasswordGenerator:
    return SecretsPasswordGenerator()


@lru_cache
def get_email_service() -> IEmailService:
    if ApplicationConfig.EMAIL_BACKEND == "console":
        return ConsoleEmailService()
    raise DependencyInjectionError("email_service", f"Unknown EMAIL_BACKEND '{ApplicationConfig.EMAIL_BACKEND}'")


@lru_cache
def get_cache_service() -> ICacheService:
    if ApplicationConfig.CACHE_BACKEND == "memory":
        return InMemoryUserCacheService()
    if ApplicationConfig.CACHE_BACKEND == "redis":
        return RedisUserCacheService.from_url(ApplicationConfig.REDIS_URL)
    raise DependencyInjectionError("cache_service", f"Unknown CACHE_BACKEND '{ApplicationConfig.CACHE_BACKEND}'")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    token_service: ITokenService = Depends(get_token_service),
    config: IConfigService = Depends(get_config_service),
) -> dict:
    """
    Dependency to extract and verify the bearer access token.

    Returns:
        Decoded JWT payload containing user_id, email, role

    Raises:
        ClientError: 401 if token is missing, invalid or expired
        ApplicationAuthorizationError: token carries no usable identity
    """
    if credentials is None:
        raise ClientError("UNAUTHENTICATED", "errors.auth.unauthenticated", status.HTTP_401_UNAUTHORIZED)

    payload = token_service.decode_access_token(
        credentials.credentials,
        config.get_access_token_secret(),
        config.get_access_token_algorithm(),
    )
    if payload is None:
        raise ClientError("INVALID_TOKEN", "errors.auth.unauthenticated", status.HTTP_401_UNAUTHORIZED)

    user_id = payload.get("user_id")
    if not user_id or payload.get("role") not in {role.value for role in UserRole}:
        raise ApplicationAuthorizationError("access_token", "authenticate", user_id, "invalid_claims")

    return payload
