from unittest.mock import AsyncMock

import pytest

from src.app.use_cases.users import UpdateUserUseCase
from src.app.use_cases.users.dtos import UpdateUserCommand
from src.domain.entities import UserRole
from src.domain.exceptions import (
    EmailAlreadyExistsError,
    InsufficientPermissionsError,
    InvalidNameError,
    RoleElevationError,
)
from tests.fixtures.factories import make_user, users_by_id


@pytest.mark.asyncio
async def test_name_only_update_keeps_email_and_role(mock_uow, mock_logger, mock_cache, super_admin, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin, regular_user)

    response = await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
        UpdateUserCommand(user_id="user-id", requesting_user_id="admin-id", name="Renamed")
    )

    assert response.name == "Renamed"
    assert response.email == regular_user.email.value
    assert response.role == regular_user.role
    updated = mock_uow.users.update.await_args.args[0]
    assert updated.id == regular_user.id
    assert updated.created_at == regular_user.created_at
    mock_cache.invalidate_user_cache.assert_awaited_once_with("user-id")
    action, actor_id, context = mock_logger.audit.call_args.args
    assert action == "audit.user.updated"
    assert context["changes"] == {"name": "Renamed"}


@pytest.mark.asyncio
async def test_manager_cannot_promote_to_super_admin(mock_uow, mock_logger, mock_cache, manager, regular_user):
    """MANAGER sets a USER's role to SUPER_ADMIN: rejected, update never called"""
    mock_uow.users.find_by_id.side_effect = users_by_id(manager, regular_user)

    with pytest.raises(RoleElevationError):
        await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
            UpdateUserCommand(user_id="user-id", requesting_user_id="manager-id", role=UserRole.SUPER_ADMIN)
        )

    mock_uow.users.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_manager_cannot_modify_another_manager(mock_uow, mock_logger, mock_cache, manager):
    other_manager = make_user(UserRole.MANAGER, "manager-2")
    mock_uow.users.find_by_id.side_effect = users_by_id(manager, other_manager)

    with pytest.raises(InsufficientPermissionsError):
        await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
            UpdateUserCommand(user_id="manager-2", requesting_user_id="manager-id", name="Changed")
        )


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.SUPER_ADMIN, UserRole.MANAGER, UserRole.USER])
async def test_nobody_changes_own_role(mock_uow, mock_logger, mock_cache, role):
    actor = make_user(role, "self-id")
    mock_uow.users.find_by_id.side_effect = users_by_id(actor)

    with pytest.raises(InsufficientPermissionsError):
        await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
            UpdateUserCommand(user_id="self-id", requesting_user_id="self-id", role=UserRole.USER)
        )


@pytest.mark.asyncio
async def test_regular_user_updates_own_profile(mock_uow, mock_logger, mock_cache, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(regular_user)

    response = await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
        UpdateUserCommand(user_id="user-id", requesting_user_id="user-id", email="New.Address@Company.com")
    )

    assert response.email == "new.address@company.com"


@pytest.mark.asyncio
async def test_regular_user_cannot_update_others(mock_uow, mock_logger, mock_cache, regular_user):
    other = make_user(UserRole.USER, "other-id")
    mock_uow.users.find_by_id.side_effect = users_by_id(regular_user, other)

    with pytest.raises(InsufficientPermissionsError):
        await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
            UpdateUserCommand(user_id="other-id", requesting_user_id="user-id", name="Changed")
        )


@pytest.mark.asyncio
async def test_unchanged_email_skips_uniqueness_check(mock_uow, mock_logger, mock_cache, super_admin, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin, regular_user)

    await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
        UpdateUserCommand(user_id="user-id", requesting_user_id="admin-id", email="USER-ID@company.com")
    )

    mock_uow.users.find_by_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_email_taken_by_someone_else(mock_uow, mock_logger, mock_cache, super_admin, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin, regular_user)
    mock_uow.users.find_by_email.return_value = make_user(UserRole.USER, "taken-id", "taken@company.com")

    with pytest.raises(EmailAlreadyExistsError):
        await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
            UpdateUserCommand(user_id="user-id", requesting_user_id="admin-id", email="taken@company.com")
        )

    mock_uow.users.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_name_is_rejected(mock_uow, mock_logger, mock_cache, super_admin, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin, regular_user)

    with pytest.raises(InvalidNameError):
        await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
            UpdateUserCommand(user_id="user-id", requesting_user_id="admin-id", name="  ")
        )


@pytest.mark.asyncio
async def test_cache_failure_does_not_fail_update(mock_uow, mock_logger, mock_cache, super_admin, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin, regular_user)
    mock_cache.invalidate_user_cache = AsyncMock(side_effect=ConnectionError("redis down"))

    response = await UpdateUserUseCase(mock_uow, mock_logger, mock_cache).execute(
        UpdateUserCommand(user_id="user-id", requesting_user_id="admin-id", name="Renamed")
    )

    assert response.name == "Renamed"
    mock_logger.warn.assert_any_call(
        "infrastructure.cache.user_cache_invalidation_failed", {"cache_error": "redis down"}
    )
