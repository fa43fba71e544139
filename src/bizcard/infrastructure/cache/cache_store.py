from __future__ import annotations

from bizcard.application.ports.cache import CacheStore
from bizcard.infrastructure.cache.redis_client import get_redis_client


class RedisCacheStore(CacheStore):
    """String values with per-key expiry. Errors from redis propagate."""

    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def _client(self):
        return get_redis_client(timeout_seconds=self._timeout_seconds)

    def get(self, key: str) -> str | None:
        value = self._client().get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client().set(name=key, value=value, ex=ttl_seconds)

    def incr(self, key: str) -> int:
        return int(self._client().incr(key))
