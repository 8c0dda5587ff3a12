"""
Domain Enums

Roles, permissions and the static role → permission table.
"""

from enum import Enum
from typing import Dict, FrozenSet


class UserRole(str, Enum):
    """User role"""

    SUPER_ADMIN = "SUPER_ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"


class Permission(str, Enum):
    """Action a role may be granted"""

    # User management
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"
    VIEW_USER = "VIEW_USER"
    VIEW_ALL_USERS = "VIEW_ALL_USERS"

    # Manager
    MANAGE_TEAM = "MANAGE_TEAM"
    VIEW_REPORTS = "VIEW_REPORTS"

    # Super admin
    MANAGE_SYSTEM = "MANAGE_SYSTEM"
    MANAGE_ROLES = "MANAGE_ROLES"
    ACCESS_ADMIN_PANEL = "ACCESS_ADMIN_PANEL"


ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Permission]] = {
    UserRole.SUPER_ADMIN: frozenset(Permission),
    UserRole.MANAGER: frozenset(
        {
            Permission.CREATE_USER,
            Permission.UPDATE_USER,
            Permission.VIEW_USER,
            Permission.VIEW_ALL_USERS,
            Permission.MANAGE_TEAM,
            Permission.VIEW_REPORTS,
        }
    ),
    # UPDATE_USER applies to the user's own profile only
    UserRole.USER: frozenset({Permission.VIEW_USER, Permission.UPDATE_USER}),
}
