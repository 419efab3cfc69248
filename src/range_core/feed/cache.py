"""TTL cache for market windows, shared by concurrent API requests."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

from range_core.logging import get_logger

log = get_logger(__name__)


class SnapshotCache:
    """Key -> value store whose entries expire *ttl_seconds* after being set.

    :meth:`get_or_load` serializes loads, so a burst of dashboard polls
    triggers one upstream fetch rather than one per request.
    """

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}
        self._lock: asyncio.Lock | None = None

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._store[key] = (self._clock(), value)

    def clear(self) -> None:
        self._store.clear()

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the fresh value under *key*, awaiting *loader* to refill it.

        A failing loader leaves the cache untouched and its error propagates.
        """
        value = self.get(key)
        if value is not None:
            return value
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            value = self.get(key)
            if value is not None:
                log.debug("cache_hit_after_wait", key=key)
                return value
            value = await loader()
            self.set(key, value)
            return value
