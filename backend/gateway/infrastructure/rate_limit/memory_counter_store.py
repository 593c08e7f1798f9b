"""In-process CounterStore for single-instance deployments and tests."""

import asyncio
from collections import defaultdict

from gateway.application.interfaces.counter_store import CounterStore


class InMemoryCounterStore(CounterStore):
    """Dict of bucket counters, each guarded by its own asyncio.Lock."""

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._windows: dict[str, int] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def increment_if_below(
        self, key: str, limit: int, *, window_index: int
    ) -> int | None:
        async with self._locks[key]:
            current = self._counts.get(key, 0)
            if current >= limit:
                return None
            self._counts[key] = current + 1
            self._windows[key] = window_index
            return current + 1

    async def purge_before(self, window_index: int) -> int:
        removed = 0
        for key in [k for k, w in self._windows.items() if w < window_index]:
            lock = self._locks.get(key)
            if lock is not None and lock.locked():
                continue
            self._counts.pop(key, None)
            self._windows.pop(key, None)
            self._locks.pop(key, None)
            removed += 1
        return removed

    def count(self, key: str) -> int:
        return self._counts.get(key, 0)
