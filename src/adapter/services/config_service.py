from typing import List

from src.app.exceptions import ServiceConfigurationError
from src.app.services.config_service import IConfigService

MIN_SECRET_LENGTH = 32


class ApplicationConfigService(IConfigService):
    """IConfigService backed by the ApplicationConfig class of config.py"""

    def __init__(self, config):
        self.config = config
        self._validate()

    def _validate(self) -> None:
        invalid: List[str] = []
        access_secret = self.config.ACCESS_TOKEN_SECRET or ""
        refresh_secret = self.config.REFRESH_TOKEN_SECRET or ""

        if len(access_secret) < MIN_SECRET_LENGTH:
            invalid.append("ACCESS_TOKEN_SECRET")
        if len(refresh_secret) < MIN_SECRET_LENGTH:
            invalid.append("REFRESH_TOKEN_SECRET")
        if access_secret and access_secret == refresh_secret:
            invalid.append("REFRESH_TOKEN_SECRET")
        if int(self.config.ACCESS_TOKEN_EXPIRES_IN) <= 0:
            invalid.append("ACCESS_TOKEN_EXPIRES_IN")
        if int(self.config.REFRESH_TOKEN_EXPIRATION_DAYS) <= 0:
            invalid.append("REFRESH_TOKEN_EXPIRATION_DAYS")

        if invalid:
            raise ServiceConfigurationError("config_service", sorted(set(invalid)))

    def get_access_token_secret(self) -> str:
        return self.config.ACCESS_TOKEN_SECRET

    def get_access_token_algorithm(self) -> str:
        return self.config.ACCESS_TOKEN_ALGORITHM

    def get_access_token_expiration_time(self) -> int:
        return int(self.config.ACCESS_TOKEN_EXPIRES_IN)

    def get_refresh_token_secret(self) -> str:
        return self.config.REFRESH_TOKEN_SECRET

    def get_refresh_token_algorithm(self) -> str:
        return self.config.REFRESH_TOKEN_ALGORITHM

    def get_refresh_token_expiration_days(self) -> int:
        return int(self.config.REFRESH_TOKEN_EXPIRATION_DAYS)

    def get_password_reset_token_validity_hours(self) -> int:
        return int(self.config.PASSWORD_RESET_TOKEN_VALIDITY_HOURS)

    def get_login_url(self) -> str:
        return self.config.APP_LOGIN_URL

    def get_password_reset_url(self) -> str:
        return self.config.PASSWORD_RESET_URL
