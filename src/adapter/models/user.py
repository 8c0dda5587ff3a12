"""
User table

Persistence shape of the User aggregate.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_uuid, utcnow
from src.domain.entities import User, UserRole
from src.domain.value_objects import Email


class UserModel(SQLModel, table=True):
    """
    User table.

    - Email is unique and stored normalized (lowercase)
    - Password stored as bcrypt hash, absent until credentialed
    """

    __tablename__ = "users"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    email: str = Field(unique=True, index=True, max_length=254)
    name: str = Field(max_length=100)
    role: UserRole = Field(default=UserRole.USER)
    hashed_password: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output is 60 chars
    password_change_required: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_role", "role"),
        Index("idx_user_created_at", "created_at"),
    )

    @classmethod
    def from_entity(cls, user: User) -> "UserModel":
        return cls(
            id=user.id,
            email=user.email.value,
            name=user.name,
            role=user.role,
            hashed_password=user.hashed_password,
            password_change_required=user.password_change_required,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_entity(self) -> User:
        return User(
            id=self.id,
            email=Email(self.email),
            name=self.name,
            role=UserRole(self.role),
            hashed_password=self.hashed_password,
            password_change_required=self.password_change_required,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def apply(self, user: User) -> None:
        """Copy every mutable field of the aggregate onto this row"""
        self.email = user.email.value
        self.name = user.name
        self.role = user.role
        self.hashed_password = user.hashed_password
        self.password_change_required = user.password_change_required
        self.updated_at = user.updated_at
