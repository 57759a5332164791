"""Per-player write serialization."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class PlayerLocks:
    """One ``asyncio.Lock`` per player id, released when nobody waits on it.

    Operations on different players never contend.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, player_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(player_id, asyncio.Lock())
        self._waiters[player_id] = self._waiters.get(player_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[player_id] -= 1
            if not self._waiters[player_id]:
                del self._waiters[player_id]
                del self._locks[player_id]

    def __len__(self) -> int:
        return len(self._locks)
