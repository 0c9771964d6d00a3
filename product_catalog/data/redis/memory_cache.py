import fnmatch
import json
import time
from typing import Any, Callable

from product_catalog.utils.logger import get_current_logger


class InMemoryCache:
    """
    Process-local stand-in for ``RedisCache`` (``CACHE_BACKEND=memory``).

    Values go through JSON like they would in Redis, so a hit hands back a
    fresh copy of what was stored. Expired entries are dropped lazily.
    None of the methods await, so each call is atomic on the event loop.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[str, float | None]] = {}

    def _alive(self, key: str) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        _, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return False
        return True

    async def get(self, key: str) -> Any | None:
        if not self._alive(key):
            return None
        return json.loads(self._entries[key][0])

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._entries[key] = (json.dumps(value), expires_at)

    async def delete(self, key: str) -> bool:
        alive = self._alive(key)
        self._entries.pop(key, None)
        return alive

    async def scan_keys(self, pattern: str) -> list[str]:
        return [key for key in list(self._entries) if fnmatch.fnmatchcase(key, pattern) and self._alive(key)]

    async def clear_pattern(self, pattern: str) -> int:
        keys = [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]
        for key in keys:
            del self._entries[key]
        get_current_logger().info(f"Deleted {len(keys)} keys matching pattern '{pattern}'")
        return len(keys)

    async def clear(self) -> None:
        self._entries.clear()

    async def health_check(self) -> bool:
        return True
