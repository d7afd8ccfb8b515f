"""Remote data cache - fetched collections keyed by resource name."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# Resource names used as cache keys
TASKS_KEY = "tasks"
CASES_KEY = "cases"
MATTERS_KEY = "matters"
EMPLOYEES_KEY = "employees"

Loader = Callable[[], Awaitable[Any]]


class QueryCache:
    """
    Explicit cache store passed to whoever needs remote collections.

    fetch() returns the cached value or runs the loader; concurrent fetches
    of a missing key share one in-flight load. invalidate() drops the entry
    so the next fetch reloads.
    """

    def __init__(self):
        self._entries: dict[str, Any] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        # Bumped on invalidate so a load started before it is not cached
        self._generations: dict[str, int] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def contains(self, key: str) -> bool:
        return key in self._entries

    async def fetch(self, key: str, loader: Loader) -> Any:
        if key in self._entries:
            logger.debug("Cache hit", cache_key=key)
            return self._entries[key]

        inflight = self._inflight.get(key)
        if inflight is None:
            logger.debug("Cache miss", cache_key=key)
            generation = self._generations.get(key, 0)
            inflight = asyncio.ensure_future(self._load(key, loader, generation))
            inflight.add_done_callback(self._consume_result)
            self._inflight[key] = inflight
        return await asyncio.shield(inflight)

    @staticmethod
    def _consume_result(task: asyncio.Task) -> None:
        # Waiters may all be cancelled; the outcome is still retrieved here
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Cache load failed", error=str(task.exception()))

    async def _load(self, key: str, loader: Loader, generation: int) -> Any:
        current = asyncio.current_task()
        try:
            value = await loader()
        finally:
            if self._inflight.get(key) is current:
                del self._inflight[key]
        if self._generations.get(key, 0) == generation:
            self._entries[key] = value
        return value

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)
        self._inflight.pop(key, None)
        self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug("Cache invalidated", cache_key=key)

    def clear(self) -> None:
        for key in list(self._entries) + list(self._inflight):
            self.invalidate(key)
