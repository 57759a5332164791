"""In-memory storage backend for PlayForge."""

from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING, Any, Mapping

from .base import LevelStore, PlayerListener, PlayerRecord, PlayerStore, Unsubscribe, check_fields
from .notifier import SnapshotNotifier

if TYPE_CHECKING:
    from ..domain.levels import LevelDefinition


class InMemoryPlayerStore(PlayerStore):
    def __init__(self, *, notifier: SnapshotNotifier | None = None) -> None:
        self._records: dict[str, PlayerRecord] = {}
        self._notifier = notifier or SnapshotNotifier()

    async def fetch(self, player_id: str) -> PlayerRecord | None:
        record = self._records.get(player_id)
        return record.copy() if record else None

    async def persist(self, record: PlayerRecord) -> None:
        self._records[record.player_id] = record.copy()
        await self._notifier.publish(self._records[record.player_id])

    async def update(self, player_id: str, values: Mapping[str, Any]) -> None:
        check_fields(values)
        try:
            record = self._records[player_id]
        except KeyError as exc:
            raise KeyError(f"Player {player_id} not found") from exc
        for name, value in values.items():
            setattr(record, name, deepcopy(value))
        await self._notifier.publish(record)

    def subscribe(self, player_id: str, listener: PlayerListener) -> Unsubscribe:
        return self._notifier.subscribe(player_id, listener)

    def __len__(self) -> int:
        return len(self._records)


class InMemoryLevelStore(LevelStore):
    def __init__(self) -> None:
        self._levels: dict[int, "LevelDefinition"] = {}

    async def fetch_level(self, level_id: int) -> "LevelDefinition | None":
        return self._levels.get(level_id)

    async def save_level(self, level: "LevelDefinition") -> None:
        self._levels[level.level_id] = level
