"""
Password Policy

Minimum strength rules shared by reset confirmation and the password
generator: at least 8 characters with upper case, lower case and a digit.
"""

import re
from dataclasses import dataclass, field
from typing import List

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class PasswordStrength:
    is_valid: bool
    score: int
    feedback: List[str] = field(default_factory=list)


def evaluate_password_strength(password: str) -> PasswordStrength:
    """
    Score a password from 0 to 5.

    One point each for minimum length, upper case, lower case, digit and
    special character. Valid when the first four rules hold.
    """
    password = password or ""
    feedback = []

    has_length = len(password) >= MIN_PASSWORD_LENGTH
    has_upper = re.search(r"[A-Z]", password) is not None
    has_lower = re.search(r"[a-z]", password) is not None
    has_digit = re.search(r"\d", password) is not None
    has_special = re.search(r"[^A-Za-z0-9]", password) is not None

    if not has_length:
        feedback.append("password.too_short")
    if not has_upper:
        feedback.append("password.missing_uppercase")
    if not has_lower:
        feedback.append("password.missing_lowercase")
    if not has_digit:
        feedback.append("password.missing_digit")
    if not has_special:
        feedback.append("password.missing_special")

    score = sum([has_length, has_upper, has_lower, has_digit, has_special])
    is_valid = has_length and has_upper and has_lower and has_digit
    return PasswordStrength(is_valid=is_valid, score=score, feedback=feedback)


def is_password_secure(password: str) -> bool:
    return evaluate_password_strength(password).is_valid
