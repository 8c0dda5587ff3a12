from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.app.exceptions import ApplicationValidationError
from src.app.repositories.user_repository import PaginatedResult, PaginationMeta
from src.app.use_cases.users import SearchUsersUseCase
from src.app.use_cases.users.dtos import SearchUsersQuery
from src.domain.entities import UserRole
from src.domain.exceptions import ForbiddenError, UserNotFoundError
from tests.fixtures.factories import users_by_id


def search_result(users, page=1, limit=20):
    return PaginatedResult(data=users, meta=PaginationMeta.build(page, limit, len(users)))


@pytest.mark.asyncio
async def test_super_admin_search_uses_defaults(mock_uow, mock_logger, super_admin, regular_user):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)
    mock_uow.users.search.return_value = search_result([regular_user])

    response = await SearchUsersUseCase(mock_uow, mock_logger).execute(
        SearchUsersQuery(requesting_user_id="admin-id", search_term="  user ")
    )

    params = mock_uow.users.search.await_args.args[0]
    assert params.page == 1
    assert params.limit == 20
    assert params.search_term == "user"
    assert params.sort_by == "created_at"
    assert params.sort_order == "desc"
    assert [user.id for user in response.data] == ["user-id"]
    assert response.meta.total == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("page, limit, expected_page, expected_limit", [(0, 0, 1, 20), (-3, 500, 1, 100), (2, 5, 2, 5)])
async def test_pagination_is_clamped(
    mock_uow, mock_logger, super_admin, page, limit, expected_page, expected_limit
):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)
    mock_uow.users.search.return_value = search_result([])

    await SearchUsersUseCase(mock_uow, mock_logger).execute(
        SearchUsersQuery(requesting_user_id="admin-id", page=page, limit=limit)
    )

    params = mock_uow.users.search.await_args.args[0]
    assert (params.page, params.limit) == (expected_page, expected_limit)


@pytest.mark.asyncio
@pytest.mark.parametrize("actor_fixture", ["manager", "regular_user"])
async def test_only_super_admin_may_search(mock_uow, mock_logger, actor_fixture, request):
    actor = request.getfixturevalue(actor_fixture)
    mock_uow.users.find_by_id.side_effect = users_by_id(actor)

    with pytest.raises(ForbiddenError):
        await SearchUsersUseCase(mock_uow, mock_logger).execute(SearchUsersQuery(requesting_user_id=actor.id))

    mock_uow.users.search.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_actor(mock_uow, mock_logger):
    with pytest.raises(UserNotFoundError):
        await SearchUsersUseCase(mock_uow, mock_logger).execute(SearchUsersQuery(requesting_user_id="ghost"))


@pytest.mark.asyncio
async def test_inverted_date_range(mock_uow, mock_logger, super_admin):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)

    with pytest.raises(ApplicationValidationError):
        await SearchUsersUseCase(mock_uow, mock_logger).execute(
            SearchUsersQuery(
                requesting_user_id="admin-id",
                created_after=datetime(2024, 6, 1),
                created_before=datetime(2024, 1, 1),
            )
        )


@pytest.mark.asyncio
async def test_unknown_sort_field(mock_uow, mock_logger, super_admin):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)

    with pytest.raises(ApplicationValidationError):
        await SearchUsersUseCase(mock_uow, mock_logger).execute(
            SearchUsersQuery(requesting_user_id="admin-id", sort_by="password")
        )


@pytest.mark.asyncio
async def test_role_filter_and_sort_are_forwarded(mock_uow, mock_logger, super_admin):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)
    mock_uow.users.search.return_value = search_result([])

    await SearchUsersUseCase(mock_uow, mock_logger).execute(
        SearchUsersQuery(
            requesting_user_id="admin-id",
            roles=[UserRole.MANAGER],
            sort_by="name",
            sort_order="ASC",
        )
    )

    params = mock_uow.users.search.await_args.args[0]
    assert params.roles == [UserRole.MANAGER]
    assert params.sort_by == "name"
    assert params.sort_order == "asc"


@pytest.mark.asyncio
async def test_aware_and_naive_dates_are_compared_in_utc(mock_uow, mock_logger, super_admin):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)
    mock_uow.users.search.return_value = search_result([])

    await SearchUsersUseCase(mock_uow, mock_logger).execute(
        SearchUsersQuery(
            requesting_user_id="admin-id",
            created_after=datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2))),
            created_before=datetime(2024, 6, 1),
        )
    )

    params = mock_uow.users.search.await_args.args[0]
    assert params.created_after == datetime(2024, 1, 1, 10, 0)
    assert params.created_after.tzinfo is None
    assert params.created_before == datetime(2024, 6, 1)


@pytest.mark.asyncio
async def test_mixed_awareness_inverted_range(mock_uow, mock_logger, super_admin):
    mock_uow.users.find_by_id.side_effect = users_by_id(super_admin)

    with pytest.raises(ApplicationValidationError):
        await SearchUsersUseCase(mock_uow, mock_logger).execute(
            SearchUsersQuery(
                requesting_user_id="admin-id",
                created_after=datetime(2024, 6, 1, tzinfo=UTC),
                created_before=datetime(2024, 1, 1),
            )
        )

    mock_uow.users.search.assert_not_awaited()
