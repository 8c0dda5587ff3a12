from abc import ABC, abstractmethod


class IConfigService(ABC):
    """Token and URL settings consumed by use cases"""

    @abstractmethod
    def get_access_token_secret(self) -> str:
        pass

    @abstractmethod
    def get_access_token_algorithm(self) -> str:
        pass

    @abstractmethod
    def get_access_token_expiration_time(self) -> int:
        """Seconds"""
        pass

    @abstractmethod
    def get_refresh_token_secret(self) -> str:
        pass

    @abstractmethod
    def get_refresh_token_algorithm(self) -> str:
        pass

    @abstractmethod
    def get_refresh_token_expiration_days(self) -> int:
        pass

    @abstractmethod
    def get_password_reset_token_validity_hours(self) -> int:
        pass

    @abstractmethod
    def get_login_url(self) -> str:
        pass

    @abstractmethod
    def get_password_reset_url(self) -> str:
        pass
