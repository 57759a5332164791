"""Level content and level completion helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

from .outcomes import Outcome, SkipReason

if TYPE_CHECKING:
    from .engine import EconomyEngine
    from ..storage.base import LevelStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LevelDefinition:
    """Static level content read from the ``levels`` collection."""

    level_id: int
    name: str = ""
    reward: int = 0
    energy_cost: int = 0
    metadata: Mapping[str, Any] = field(default_factory=dict)


class LevelService:
    """Read-only access to level content."""

    def __init__(self, store: "LevelStore") -> None:
        self._store = store

    async def fetch_level(self, level_id: int) -> LevelDefinition | None:
        return await self._store.fetch_level(level_id)

    async def register(self, level: LevelDefinition) -> None:
        if level.level_id <= 0:
            raise ValueError("Level id must be positive")
        await self._store.save_level(level)

    async def complete(self, engine: "EconomyEngine", player_id: str, level_id: int) -> Outcome:
        """Complete ``level_id`` for a player using the reward from level content."""
        level = await self.fetch_level(level_id)
        if level is None:
            logger.warning("Level %s is not defined", level_id)
            return Outcome.skipped(SkipReason.UNKNOWN_LEVEL, detail=f"level {level_id} is not defined")
        return await engine.try_complete_level(player_id, level.level_id, level.reward)
