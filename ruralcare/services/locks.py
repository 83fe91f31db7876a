import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Hashable


class KeyedLocks:
    """One asyncio.Lock per key, created on first use.

    Used to serialize check-then-write sequences (slot booking per doctor and
    day, sequential id allocation per prefix) inside this process.
    """

    def __init__(self):
        self._locks: dict = defaultdict(asyncio.Lock)
        self._waiters: dict = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: Hashable):
        self._waiters[key] += 1
        lock = self._locks[key]
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)
