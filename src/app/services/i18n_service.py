from abc import ABC, abstractmethod
from typing import Any, Optional


class II18nService(ABC):
    """Resolves message keys to display strings at the presentation boundary"""

    @abstractmethod
    def translate(self, key: str, lang: Optional[str] = None, **params: Any) -> str:
        pass

    @abstractmethod
    def exists(self, key: str, lang: Optional[str] = None) -> bool:
        pass
