import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from src.app.services.cache_service import ICacheService

logger = logging.getLogger(__name__)

USER_CACHE_TTL_SECONDS = 900


class InMemoryUserCacheService(ICacheService):
    """Process-local user cache, entries never expire"""

    def __init__(self):
        self._entries: Dict[str, Dict[str, Any]] = {}

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        payload = self._entries.get(user_id)
        return dict(payload) if payload is not None else None

    async def set_user(self, user_id: str, payload: Dict[str, Any]) -> None:
        self._entries[user_id] = dict(payload)

    async def invalidate_user_cache(self, user_id: str) -> None:
        self._entries.pop(user_id, None)


class RedisUserCacheService(ICacheService):
    """
    Redis-backed user cache.

    Every key of a user lives under ``{prefix}user:{user_id}``; invalidation
    removes the entry and any ``{prefix}user:{user_id}:*`` sub-keys.
    Payloads are stored as JSON with a TTL.
    Redis errors propagate so callers can decide whether to fail closed.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "users:", ttl_seconds: int = USER_CACHE_TTL_SECONDS):
        self._redis = redis_client
        self._prefix = key_prefix
        self._ttl = ttl_seconds

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "users:") -> "RedisUserCacheService":
        return cls(redis.from_url(url, decode_responses=True), key_prefix)

    def _user_key(self, user_id: str) -> str:
        return f"{self._prefix}user:{user_id}"

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        raw = await self._redis.get(self._user_key(user_id))
        if raw is None:
            return None
        return json.loads(raw)

    async def set_user(self, user_id: str, payload: Dict[str, Any]) -> None:
        await self._redis.set(self._user_key(user_id), json.dumps(payload), ex=self._ttl)

    async def invalidate_user_cache(self, user_id: str) -> None:
        base_key = self._user_key(user_id)
        keys = [base_key]
        async for key in self._redis.scan_iter(match=f"{base_key}:*"):
            keys.append(key)
        deleted = await self._redis.delete(*keys)
        logger.debug(f"Invalidated {deleted} cache keys for user {user_id}")
