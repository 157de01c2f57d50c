"""Resilience – Cache-Aside policy and an in-process TTL cache."""
from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar

__all__ = [
    "CacheAsidePolicy",
    "InMemoryTTLCache",
    "SimpleCache",
]

T = TypeVar("T")


class SimpleCache(Protocol):
    async def get(self, key: str) -> Any: ...
    async def set(self, key: str, value: Any, ttl: float) -> None: ...


class InMemoryTTLCache:
    """Dict-backed :class:`SimpleCache` whose entries expire after *ttl* seconds.

    Parameters
    ----------
    clock:
        Monotonic time source, replaceable in tests.
    max_entries:
        When exceeded, expired entries are purged and then the oldest
        insertion is evicted.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 10_000,
    ) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, Any]] = {}

    async def get(self, key: str) -> Any:
        item = self._entries.get(key)
        if item is None:
            return None
        expires_at, value = item
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            return
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self._evict()
        self._entries[key] = (self._clock() + ttl, value)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, (exp, _) in self._entries.items() if exp <= now]:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]


class CacheAsidePolicy(Generic[T]):
    """Implements the cache-aside (lazy-loading) pattern with stampede protection.

    Loader failures are not cached; the exception reaches the caller.
    """

    def __init__(self, cache: SimpleCache, ttl: float = 300.0) -> None:
        self._cache = cache
        self._ttl = ttl
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[T]]) -> T:
        cached = await self._cache.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]

        # only one coroutine loads per key; the lock lives while anyone uses it
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                cached = await self._cache.get(key)
                if cached is not None:
                    return cached  # type: ignore[return-value]
                value = await loader()
                await self._cache.set(key, value, self._ttl)
                return value
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]
