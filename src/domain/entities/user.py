"""
User Entity

Immutable aggregate holding identity, role and credential state.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from src.domain.base import generate_uuid, utcnow
from src.domain.exceptions import InvalidNameError
from src.domain.value_objects import Email

from .enums import ROLE_PERMISSIONS, Permission, UserRole

MAX_NAME_LENGTH = 100


@dataclass(frozen=True)
class User:
    """
    User entity.

    Business Rules:
    - Name is trimmed, 1-100 characters
    - id and created_at never change once assigned
    - Never mutated in place: changes produce a new instance (with_changes)
    - hashed_password is absent until the user is credentialed
    """

    email: Email
    name: str
    role: UserRole
    id: str = field(default_factory=generate_uuid)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    hashed_password: Optional[str] = None
    password_change_required: bool = False

    def __post_init__(self):
        if self.name is None or not self.name.strip():
            raise InvalidNameError(self.name, reason="empty")
        if len(self.name.strip()) > MAX_NAME_LENGTH:
            raise InvalidNameError(self.name, reason="too_long")
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "role", UserRole(self.role))

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, email: Email, name: str, role: UserRole) -> "User":
        return cls(email=email, name=name, role=role)

    @classmethod
    def create_temporary(cls, email: Email, name: str, role: UserRole) -> "User":
        """User who must change password on first login"""
        return cls(email=email, name=name, role=role, password_change_required=True)

    # ------------------------------------------------------------------
    # Permission queries
    # ------------------------------------------------------------------

    def has_permission(self, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS[self.role]

    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    def is_regular_user(self) -> bool:
        return self.role == UserRole.USER

    def has_same_email(self, other: "User") -> bool:
        return self.email == other.email

    def can_act_on_user(self, target: "User") -> bool:
        """
        Advisory inter-user rule:
        - SUPER_ADMIN may act on anyone
        - MANAGER may act on USER targets and on themself
        - anyone else only on themself
        """
        if self.is_super_admin():
            return True
        if self.is_manager():
            return target.is_regular_user() or self.has_same_email(target)
        return self.has_same_email(target)

    # ------------------------------------------------------------------
    # Clone-with-changes
    # ------------------------------------------------------------------

    def with_changes(self, **changes) -> "User":
        """Return a copy with the given fields changed, keeping id and created_at."""
        changes.pop("id", None)
        changes.pop("created_at", None)
        changes.setdefault("updated_at", utcnow())
        return replace(self, **changes)

    def require_password_change(self) -> "User":
        if self.password_change_required:
            return self
        return self.with_changes(password_change_required=True)

    def clear_password_change_requirement(self) -> "User":
        if not self.password_change_required:
            return self
        return self.with_changes(password_change_required=False)

    def with_password(self, hashed_password: str) -> "User":
        return self.with_changes(hashed_password=hashed_password)
