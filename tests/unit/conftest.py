import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.entities import UserRole
from tests.fixtures.factories import make_user


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.find_by_id = AsyncMock(return_value=None)
    uow.users.find_by_email = AsyncMock(return_value=None)
    uow.users.save = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.delete = AsyncMock()
    uow.users.search = AsyncMock()

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.save = AsyncMock(side_effect=lambda token: token)
    uow.refresh_tokens.find_by_token = AsyncMock(return_value=None)
    uow.refresh_tokens.revoke_by_token = AsyncMock(return_value=True)
    uow.refresh_tokens.revoke_all_by_user_id = AsyncMock(return_value=0)
    uow.refresh_tokens.delete_expired = AsyncMock(return_value=0)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.save = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.find_by_token = AsyncMock(return_value=None)
    uow.password_reset_tokens.delete_by_user_id = AsyncMock()
    uow.password_reset_tokens.delete_expired_tokens = AsyncMock(return_value=0)
    return uow


@pytest.fixture
def mock_logger():
    """Logger whose child() is itself, so every call lands on one mock"""
    logger = MagicMock()
    logger.child.return_value = logger
    return logger


@pytest.fixture
def mock_cache():
    cache = MagicMock()
    cache.get_user = AsyncMock(return_value=None)
    cache.set_user = AsyncMock()
    cache.invalidate_user_cache = AsyncMock()
    return cache


@pytest.fixture
def super_admin():
    return make_user(UserRole.SUPER_ADMIN, "admin-id")


@pytest.fixture
def manager():
    return make_user(UserRole.MANAGER, "manager-id")


@pytest.fixture
def regular_user():
    return make_user(UserRole.USER, "user-id")
