"""
Search Users Use Case

Filtered, sorted and paginated user listing for administrators.
"""

import time

from src.app.exceptions import ApplicationValidationError
from src.app.repositories.user_repository import UserQueryParams
from src.app.services.logger import ILogger, elapsed_ms
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import to_naive_utc
from src.domain.entities import UserRole
from src.domain.exceptions import ForbiddenError, UserNotFoundError

from .dtos import SearchUsersQuery, SearchUsersResponse, UserResponse

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
SORT_FIELDS = ("created_at", "name", "email", "role")
SORT_ORDERS = ("asc", "desc")


class SearchUsersUseCase:
    """
    Use case for searching users.

    Only SUPER_ADMIN may search. Page defaults to 1 and limit to 20,
    both clamped (limit into [1, 100]).
    """

    def __init__(self, uow: UnitOfWork, logger: ILogger):
        self.uow = uow
        self.logger = logger

    async def execute(self, query: SearchUsersQuery) -> SearchUsersResponse:
        started = time.perf_counter()
        log = self.logger.child({"operation": "SearchUsers", "requesting_user_id": query.requesting_user_id})
        log.info(
            "operations.user.search_attempt",
            {"filters": query.model_dump(exclude={"requesting_user_id"}, exclude_none=True, mode="json")},
        )

        try:
            params = self._build_params(query)

            async with self.uow:
                requesting_user = await self.uow.users.find_by_id(query.requesting_user_id)
                if requesting_user is None:
                    log.warn("warnings.user.not_found")
                    raise UserNotFoundError(query.requesting_user_id)

                if requesting_user.role != UserRole.SUPER_ADMIN:
                    log.warn("warnings.permission.denied", {"requesting_user_role": requesting_user.role.value})
                    raise ForbiddenError("search_users", requesting_user.id, requesting_user.role.value)

                result = await self.uow.users.search(params)
        except Exception as error:
            log.error("operations.failed", error, {"duration_ms": elapsed_ms(started)})
            raise

        log.info(
            "success.user.search_success",
            {
                "result_count": len(result.data),
                "total": result.meta.total,
                "duration_ms": elapsed_ms(started),
            },
        )
        return SearchUsersResponse(
            data=[UserResponse.from_user(user) for user in result.data],
            meta=result.meta,
        )

    @staticmethod
    def _build_params(query: SearchUsersQuery) -> UserQueryParams:
        page = max(query.page or DEFAULT_PAGE, 1)
        limit = min(max(query.limit or DEFAULT_LIMIT, 1), MAX_LIMIT)

        sort_by = query.sort_by or "created_at"
        if sort_by not in SORT_FIELDS:
            raise ApplicationValidationError("sort_by", sort_by, "one_of:" + ",".join(SORT_FIELDS))
        sort_order = (query.sort_order or "desc").lower()
        if sort_order not in SORT_ORDERS:
            raise ApplicationValidationError("sort_order", query.sort_order, "one_of:asc,desc")

        created_after = to_naive_utc(query.created_after)
        created_before = to_naive_utc(query.created_before)
        if created_after and created_before and created_after > created_before:
            raise ApplicationValidationError("created_after", query.created_after, "before_created_before")

        search_term = query.search_term.strip() if query.search_term else None

        return UserQueryParams(
            page=page,
            limit=limit,
            search_term=search_term or None,
            roles=query.roles or None,
            created_after=created_after,
            created_before=created_before,
            sort_by=sort_by,
            sort_order=sort_order,
        )
