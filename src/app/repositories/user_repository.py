from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from math import ceil
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from src.domain.entities import User, UserRole
from src.domain.value_objects import Email

T = TypeVar("T")


class DuplicateKeyError(Exception):
    """Raised by persistence adapters when a unique constraint is violated"""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {field}")


class UserQueryParams(BaseModel):
    """Filtering, sorting and pagination options for user listings"""

    page: int = 1
    limit: int = 20
    search_term: Optional[str] = None
    roles: Optional[List[UserRole]] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


@dataclass
class PaginatedResult(Generic[T]):
    data: List[T]
    meta: PaginationMeta


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def save(self, user: User) -> User:
        """Persist a new user"""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """Get user by normalized email address"""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Delete user by ID"""
        pass

    @abstractmethod
    async def find_all(self, params: Optional[UserQueryParams] = None) -> PaginatedResult[User]:
        """List users with pagination"""
        pass

    @abstractmethod
    async def search(self, params: UserQueryParams) -> PaginatedResult[User]:
        """Search users by term, roles and creation date range"""
        pass

    @abstractmethod
    async def find_by_role(
        self, role: UserRole, params: Optional[UserQueryParams] = None
    ) -> PaginatedResult[User]:
        """List users having the given role"""
        pass

    @abstractmethod
    async def email_exists(self, email: Email) -> bool:
        """Check whether an email is already registered"""
        pass

    @abstractmethod
    async def count_super_admins(self) -> int:
        """Count SUPER_ADMIN users"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all users"""
        pass

    @abstractmethod
    async def count_with_filters(self, params: UserQueryParams) -> int:
        """Count users matching the filters of params"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Replace the stored aggregate, keeping its id"""
        pass

    @abstractmethod
    async def update_batch(self, users: List[User]) -> List[User]:
        """Replace several aggregates"""
        pass

    @abstractmethod
    async def delete_batch(self, user_ids: List[str]) -> None:
        """Delete several users"""
        pass

    @abstractmethod
    async def export(self, params: Optional[UserQueryParams] = None) -> List[User]:
        """Return every user matching params, unpaginated"""
        pass
