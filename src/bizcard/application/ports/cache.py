from __future__ import annotations

from typing import Protocol


class CacheStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    def incr(self, key: str) -> int:
        """Atomically add one to a counter key, creating it at 1."""
        ...
