import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.adapter.models  # noqa: F401
from config import ApplicationConfig
from src.adapter.services.cache_service import InMemoryUserCacheService
from src.adapter.services.email_service import ConsoleEmailService
from src.adapter.services.password_service import BcryptPasswordService
from src.adapter.services.token_service import JoseTokenService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    enable_sqlite_foreign_keys,
    get_cache_service,
    get_email_service,
    get_password_service,
    get_unit_of_work,
)
from src.domain.entities import User, UserRole
from src.domain.value_objects import Email
from tests.fixtures.json_loader import TestDataLoader


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def password_service():
    return BcryptPasswordService(rounds=4)


@pytest.fixture
def email_service():
    return ConsoleEmailService()


@pytest.fixture
def cache_service():
    return InMemoryUserCacheService()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_users(db_session, password_service, test_data):
    """Users from test_data.json, all sharing the test password"""
    hashed_password = await password_service.hash(test_data.get("password"))
    users = {}
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        for key, data in test_data.get("users").items():
            user = User(
                id=data["id"],
                email=Email(data["email"]),
                name=data["name"],
                role=UserRole(data["role"]),
                hashed_password=hashed_password,
            )
            users[key] = await uow.users.save(user)
        await uow.commit()
    return users


@pytest.fixture
def auth_headers():
    """Build a bearer header for a seeded user"""
    token_service = JoseTokenService()

    def build(user: User) -> dict:
        token = token_service.generate_access_token(
            user.id,
            user.email.value,
            user.role.value,
            ApplicationConfig.ACCESS_TOKEN_SECRET,
            int(ApplicationConfig.ACCESS_TOKEN_EXPIRES_IN),
            ApplicationConfig.ACCESS_TOKEN_ALGORITHM,
        )
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest_asyncio.fixture
async def client(db_session, password_service, email_service, cache_service, seeded_users):
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_password_service] = lambda: password_service
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_cache_service] = lambda: cache_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
