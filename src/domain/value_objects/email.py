"""
Email Value Object

Self-validating, normalized email address.
"""

import re

from src.domain.exceptions import InvalidEmailFormatError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MAX_EMAIL_LENGTH = 254


class Email:
    """
    Email value object.

    Business Rules:
    - Must not be empty
    - At most 254 characters
    - Must match the address grammar
    - Stored trimmed and lowercased; equality is on the normalized value
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        if value is None or not value.strip():
            raise InvalidEmailFormatError(value, reason="empty")
        if len(value) > MAX_EMAIL_LENGTH:
            raise InvalidEmailFormatError(value, reason="too_long")
        if not EMAIL_PATTERN.match(value.strip()):
            raise InvalidEmailFormatError(value, reason="invalid_format")
        self._value = value.strip().lower()

    @property
    def value(self) -> str:
        return self._value

    @property
    def domain(self) -> str:
        return self._value.split("@")[1]

    @property
    def local_part(self) -> str:
        return self._value.split("@")[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Email):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Email({self._value!r})"
