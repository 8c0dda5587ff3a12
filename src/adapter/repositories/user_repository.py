from typing import List, Optional

from sqlalchemy import delete, func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.models import UserModel
from src.app.repositories.user_repository import (
    DuplicateKeyError,
    IUserRepository,
    PaginatedResult,
    PaginationMeta,
    UserQueryParams,
)
from src.domain.entities import User, UserRole
from src.domain.value_objects import Email

SORT_COLUMNS = {
    "created_at": UserModel.created_at,
    "name": UserModel.name,
    "email": UserModel.email,
    "role": UserModel.role,
}

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    """Search terms match literally; LIKE wildcards in them are escaped"""
    return term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, user: User) -> User:
        """Insert a new user"""
        model = UserModel.from_entity(user)
        self.session.add(model)
        await self._flush(user)
        await self.session.refresh(model)
        return model.to_entity()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        model = await self._get_model(user_id)
        return model.to_entity() if model else None

    async def find_by_email(self, email: Email) -> Optional[User]:
        """Get user by normalized email address"""
        stmt = select(UserModel).where(UserModel.email == email.value)
        result = await self.session.exec(stmt)
        model = result.one_or_none()
        return model.to_entity() if model else None

    async def delete(self, user_id: str) -> None:
        await self.session.execute(delete(UserModel).where(col(UserModel.id) == user_id))
        await self.session.flush()

    async def find_all(self, params: Optional[UserQueryParams] = None) -> PaginatedResult[User]:
        return await self.search(params or UserQueryParams())

    async def search(self, params: UserQueryParams) -> PaginatedResult[User]:
        """Filter, sort and paginate users"""
        stmt = self._apply_sort(self._apply_filters(select(UserModel), params), params)
        stmt = stmt.offset(params.offset).limit(params.limit)
        result = await self.session.exec(stmt)
        users = [model.to_entity() for model in result.all()]

        total = await self.count_with_filters(params)
        return PaginatedResult(data=users, meta=PaginationMeta.build(params.page, params.limit, total))

    async def find_by_role(self, role: UserRole, params: Optional[UserQueryParams] = None) -> PaginatedResult[User]:
        params = (params or UserQueryParams()).model_copy(update={"roles": [role]})
        return await self.search(params)

    async def email_exists(self, email: Email) -> bool:
        stmt = select(func.count()).select_from(UserModel).where(UserModel.email == email.value)
        result = await self.session.exec(stmt)
        return result.one() > 0

    async def count_super_admins(self) -> int:
        stmt = select(func.count()).select_from(UserModel).where(UserModel.role == UserRole.SUPER_ADMIN)
        result = await self.session.exec(stmt)
        return result.one()

    async def count(self) -> int:
        result = await self.session.exec(select(func.count()).select_from(UserModel))
        return result.one()

    async def count_with_filters(self, params: UserQueryParams) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(UserModel), params)
        result = await self.session.exec(stmt)
        return result.one()

    async def update(self, user: User) -> User:
        """Replace the stored aggregate; id and created_at are kept from the row"""
        model = await self._get_model(user.id)
        if model is None:
            raise LookupError(f"User {user.id} does not exist")
        model.apply(user)
        self.session.add(model)
        await self._flush(user)
        await self.session.refresh(model)
        return model.to_entity()

    async def update_batch(self, users: List[User]) -> List[User]:
        return [await self.update(user) for user in users]

    async def delete_batch(self, user_ids: List[str]) -> None:
        if not user_ids:
            return
        await self.session.execute(delete(UserModel).where(col(UserModel.id).in_(user_ids)))
        await self.session.flush()

    async def export(self, params: Optional[UserQueryParams] = None) -> List[User]:
        params = params or UserQueryParams()
        stmt = self._apply_sort(self._apply_filters(select(UserModel), params), params)
        result = await self.session.exec(stmt)
        return [model.to_entity() for model in result.all()]

    async def _get_model(self, user_id: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def _flush(self, user: User) -> None:
        try:
            await self.session.flush()
        except IntegrityError as error:
            raise DuplicateKeyError("email", user.email.value) from error

    @staticmethod
    def _apply_filters(stmt, params: UserQueryParams):
        if params.search_term:
            pattern = f"%{_escape_like(params.search_term)}%"
            stmt = stmt.where(
                or_(
                    col(UserModel.name).ilike(pattern, escape=LIKE_ESCAPE),
                    col(UserModel.email).ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        if params.roles:
            stmt = stmt.where(col(UserModel.role).in_(params.roles))
        if params.created_after:
            stmt = stmt.where(col(UserModel.created_at) >= params.created_after)
        if params.created_before:
            stmt = stmt.where(col(UserModel.created_at) <= params.created_before)
        return stmt

    @staticmethod
    def _apply_sort(stmt, params: UserQueryParams):
        column = col(SORT_COLUMNS.get(params.sort_by, UserModel.created_at))
        ordering = column.asc() if params.sort_order == "asc" else column.desc()
        return stmt.order_by(ordering, col(UserModel.id).asc())
