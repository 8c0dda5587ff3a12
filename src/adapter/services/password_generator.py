import secrets
import string

from src.app.services.password_generator import IPasswordGenerator
from src.domain.services.password_policy import PasswordStrength, evaluate_password_strength

TEMPORARY_PASSWORD_LENGTH = 12
SPECIAL_CHARACTERS = "!@#$%^&*"


class SecretsPasswordGenerator(IPasswordGenerator):
    """Cryptographically secure passwords and reset tokens"""

    def __init__(self, password_length: int = TEMPORARY_PASSWORD_LENGTH):
        self.password_length = max(password_length, 8)

    async def generate_temporary_password(self) -> str:
        # One character of each class, then shuffle
        required = [
            secrets.choice(string.ascii_uppercase),
            secrets.choice(string.ascii_lowercase),
            secrets.choice(string.digits),
            secrets.choice(SPECIAL_CHARACTERS),
        ]
        alphabet = string.ascii_letters + string.digits + SPECIAL_CHARACTERS
        rest = [secrets.choice(alphabet) for _ in range(self.password_length - len(required))]

        characters = required + rest
        secrets.SystemRandom().shuffle(characters)
        return "".join(characters)

    async def generate_reset_token(self) -> str:
        return secrets.token_urlsafe(32)

    def validate_password_strength(self, password: str) -> PasswordStrength:
        return evaluate_password_strength(password)
