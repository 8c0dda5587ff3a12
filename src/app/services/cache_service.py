from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ICacheService(ABC):
    """User cache port"""

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Cached user payload, None on a miss"""
        pass

    @abstractmethod
    async def set_user(self, user_id: str, payload: Dict[str, Any]) -> None:
        """Cache a JSON-serializable user payload"""
        pass

    @abstractmethod
    async def invalidate_user_cache(self, user_id: str) -> None:
        """Drop every cached entry derived from the user"""
        pass
