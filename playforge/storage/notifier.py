"""Realtime push of player snapshots to in-process subscribers."""

from __future__ import annotations

from collections import defaultdict
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import AsyncIterator, DefaultDict

from .base import PlayerListener, PlayerRecord, Unsubscribe

# Snapshots held back by ``deferred_snapshots`` in the current task.
_pending: ContextVar[list[tuple["SnapshotNotifier", PlayerRecord]] | None] = ContextVar(
    "playforge_pending_snapshots", default=None
)


@asynccontextmanager
async def deferred_snapshots() -> AsyncIterator[None]:
    """Hold back snapshot delivery until the block exits.

    Snapshots published inside the block are queued in write order and
    delivered once it is left, so listeners run after the caller has released
    whatever it held while writing. Nested blocks join the outermost queue.
    """
    if _pending.get() is not None:
        yield
        return
    queue: list[tuple[SnapshotNotifier, PlayerRecord]] = []
    token = _pending.set(queue)
    try:
        yield
    finally:
        _pending.reset(token)
        for notifier, record in queue:
            await notifier._deliver(record)


class SnapshotNotifier:
    """Deliver full-record snapshots to every subscriber of a player id.

    Listeners are awaited one by one in subscription order. Each one gets its
    own copy of the record, so a listener cannot corrupt what the next sees.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[PlayerListener]] = defaultdict(list)

    def subscribe(self, player_id: str, listener: PlayerListener) -> Unsubscribe:
        self._listeners[player_id].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(player_id)
            if listeners and listener in listeners:
                listeners.remove(listener)
                if not listeners:
                    del self._listeners[player_id]

        return unsubscribe

    async def publish(self, record: PlayerRecord) -> None:
        if not self.has_listeners(record.player_id):
            return
        queue = _pending.get()
        if queue is not None:
            queue.append((self, record.copy()))
            return
        await self._deliver(record)

    async def _deliver(self, record: PlayerRecord) -> None:
        for listener in list(self._listeners.get(record.player_id, ())):
            await listener(record.copy())

    def has_listeners(self, player_id: str) -> bool:
        return bool(self._listeners.get(player_id))

    def clear(self) -> None:
        self._listeners.clear()
