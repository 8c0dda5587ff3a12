from fastapi import status

# Exception code -> HTTP status. Codes not listed map to 500.
STATUS_BY_CODE = {
    # Not found
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    # Conflict
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "TOKEN_ALREADY_REVOKED": status.HTTP_409_CONFLICT,
    # Validation
    "INVALID_EMAIL_FORMAT": status.HTTP_400_BAD_REQUEST,
    "INVALID_NAME": status.HTTP_400_BAD_REQUEST,
    "APPLICATION_VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    # Authentication
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_REFRESH_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    # Authorization
    "INSUFFICIENT_PERMISSIONS": status.HTTP_403_FORBIDDEN,
    "ROLE_ELEVATION_FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "SELF_DELETION_FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "APPLICATION_AUTHORIZATION_ERROR": status.HTTP_403_FORBIDDEN,
}


def status_for_code(code: str) -> int:
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


class ClientError(Exception):
    """Error raised by the HTTP layer itself; message is an i18n key"""

    def __init__(self, code: str, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)
