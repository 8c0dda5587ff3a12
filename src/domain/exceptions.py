"""
Domain Exceptions

Every exception carries a stable machine-readable code, an i18n key (also
used as the exception message) and structured context for logging.
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base class for business rule violations"""

    code = "DOMAIN_ERROR"
    i18n_key = "errors.domain.general_error"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(self.i18n_key)

    @property
    def message(self) -> str:
        return self.i18n_key


# ============================================================================
# Not found / conflict
# ============================================================================


class UserNotFoundError(DomainException):
    code = "USER_NOT_FOUND"
    i18n_key = "errors.user.not_found"

    def __init__(self, user_id: Optional[str]):
        super().__init__({"user_id": user_id})


class EmailAlreadyExistsError(DomainException):
    code = "EMAIL_ALREADY_EXISTS"
    i18n_key = "errors.user.email_already_exists"

    def __init__(self, email: str):
        super().__init__({"email": email})


# ============================================================================
# Validation
# ============================================================================


class InvalidEmailFormatError(DomainException):
    code = "INVALID_EMAIL_FORMAT"
    i18n_key = "errors.validation.invalid_email"

    def __init__(self, email: Optional[str], reason: str = "invalid_format"):
        super().__init__({"email": email, "reason": reason})


class InvalidNameError(DomainException):
    code = "INVALID_NAME"
    i18n_key = "errors.validation.invalid_name"

    def __init__(self, name: Optional[str], reason: str):
        super().__init__({"name": name, "reason": reason})


# ============================================================================
# Authentication / authorization
# ============================================================================


class InvalidCredentialsError(DomainException):
    """Same error for unknown email and wrong password."""

    code = "INVALID_CREDENTIALS"
    i18n_key = "errors.auth.invalid_credentials"

    def __init__(self):
        super().__init__()


class InsufficientPermissionsError(DomainException):
    code = "INSUFFICIENT_PERMISSIONS"
    i18n_key = "errors.auth.insufficient_permissions"

    def __init__(self, permission: str, user_role: str):
        super().__init__({"permission": permission, "user_role": user_role})


class RoleElevationError(DomainException):
    code = "ROLE_ELEVATION_FORBIDDEN"
    i18n_key = "errors.auth.role_elevation_forbidden"

    def __init__(self, from_role: str, to_role: str):
        super().__init__({"from_role": from_role, "to_role": to_role})


class SelfDeletionError(DomainException):
    code = "SELF_DELETION_FORBIDDEN"
    i18n_key = "errors.user.self_deletion_forbidden"

    def __init__(self, user_id: str):
        super().__init__({"user_id": user_id})


class ForbiddenError(DomainException):
    code = "FORBIDDEN"
    i18n_key = "errors.auth.forbidden"

    def __init__(self, action: str, user_id: Optional[str] = None, user_role: Optional[str] = None):
        super().__init__({"action": action, "user_id": user_id, "user_role": user_role})


class InvalidRefreshTokenError(DomainException):
    code = "INVALID_REFRESH_TOKEN"
    i18n_key = "errors.refresh_token.invalid_token"

    def __init__(self, reason: str = "invalid"):
        super().__init__({"reason": reason})


class TokenExpiredError(DomainException):
    code = "TOKEN_EXPIRED"
    i18n_key = "errors.refresh_token.token_expired"

    def __init__(self, user_id: Optional[str] = None):
        super().__init__({"user_id": user_id})


class TokenAlreadyRevokedError(DomainException):
    code = "TOKEN_ALREADY_REVOKED"
    i18n_key = "errors.refresh_token.already_revoked"

    def __init__(self, token_id: str):
        super().__init__({"token_id": token_id})
