"""Top level application object for PlayForge games."""

from __future__ import annotations

from typing import Any

from .clock import Clock
from .config import PlayForgeConfig
from .domain.engine import EconomyEngine
from .domain.events import EventBus
from .domain.levels import LevelService
from .domain.locks import PlayerLocks
from .storage.base import LevelStore, PlayerStore
from .storage.memory import InMemoryLevelStore, InMemoryPlayerStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage


class EconomyApp:
    """Central dependency container used by game backends."""

    def __init__(
        self,
        config: PlayForgeConfig,
        *,
        player_store: PlayerStore | None = None,
        level_store: LevelStore | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.player_store, self.level_store = self._wire_storage(player_store, level_store)

        self.locks = PlayerLocks() if config.serialize_player_writes else None
        self.engine = EconomyEngine(
            self.player_store,
            self.config.economy,
            event_bus=self.event_bus,
            clock=clock,
            locks=self.locks,
        )
        self.levels = LevelService(self.level_store)

    def _wire_storage(
        self,
        player_store: PlayerStore | None,
        level_store: LevelStore | None,
    ) -> tuple[PlayerStore, LevelStore]:
        if player_store and level_store:
            return player_store, level_store

        backend = self.config.storage.backend
        if backend == "memory":
            return (
                player_store or InMemoryPlayerStore(),
                level_store or InMemoryLevelStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return (
                player_store or storage.player_store(),
                level_store or storage.level_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        economy = self.config.economy
        return {
            "storage": self.config.storage.backend,
            "serialize_player_writes": self.config.serialize_player_writes,
            "max_energy": economy.max_energy,
            "energy_refill_rate_ms": economy.default_energy_refill_rate_ms,
            "cost_per_energy": economy.cost_per_energy,
            "boost_duration_seconds": economy.boost_duration_seconds,
            "referral": {
                "step": economy.referral_multiplier_step,
                "max": economy.max_referral_multiplier,
            },
            "asset_costs": dict(economy.asset_costs),
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
