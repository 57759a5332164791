"""Economy simulation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

from ..app import EconomyApp
from ..config import EconomyConfig, PlayForgeConfig
from ..domain.energy import elapsed_ms
from ..domain.levels import LevelDefinition
from ..clock import FrozenClock

SIMULATED_PLAYER = "simulated-player"


@dataclass(slots=True)
class SimulationResult:
    hours: float
    levels_completed: int = 0
    coins_earned: int = 0
    energy_spent: int = 0
    minutes_waiting: float = 0.0
    referral_multiplier: float = 1.0
    stopped_at_level: int | None = None


class EconomySimulator:
    """Play one player through a level list on a simulated clock.

    The player plays whenever their energy covers the next level and otherwise
    waits exactly as long as regeneration needs. Runs the real engine against
    in-memory stores, so the numbers follow the configured economy rules.
    """

    def __init__(self, config: EconomyConfig, *, minutes_per_level: float = 1.0) -> None:
        self._config = config
        self._minutes_per_level = minutes_per_level

    async def simulate(
        self,
        levels: Sequence[LevelDefinition],
        *,
        hours: float = 24.0,
        referrals: int = 0,
    ) -> SimulationResult:
        clock = FrozenClock()
        app = EconomyApp(PlayForgeConfig(economy=self._config), clock=clock)
        engine = app.engine
        for level in levels:
            await app.levels.register(level)

        await engine.initialize(SIMULATED_PLAYER)
        for index in range(referrals):
            await engine.initialize(f"{SIMULATED_PLAYER}-ref-{index}", SIMULATED_PLAYER)

        result = SimulationResult(hours=hours)
        deadline = clock() + timedelta(hours=hours)

        for level in sorted(levels, key=lambda item: item.level_id):
            if clock() >= deadline or level.energy_cost > self._config.max_energy:
                result.stopped_at_level = level.level_id
                break

            wait_ms = await self._wait_for_energy(app, clock, level.energy_cost)
            if clock() + timedelta(milliseconds=wait_ms) > deadline:
                result.stopped_at_level = level.level_id
                break
            clock.advance(milliseconds=wait_ms)
            result.minutes_waiting += wait_ms / 60_000

            await engine.spend_energy(SIMULATED_PLAYER, level.energy_cost)
            clock.advance(minutes=self._minutes_per_level)
            outcome = await app.levels.complete(engine, SIMULATED_PLAYER, level.level_id)
            if not outcome.is_applied:
                result.stopped_at_level = level.level_id
                break
            result.levels_completed += 1
            result.coins_earned += outcome.value
            result.energy_spent += level.energy_cost

        record = await engine.fetch_player(SIMULATED_PLAYER)
        if record is not None:
            result.referral_multiplier = record.referral_multiplier
        return result

    async def _wait_for_energy(self, app: EconomyApp, clock: FrozenClock, cost: int) -> int:
        if await app.engine.current_energy(SIMULATED_PLAYER) >= cost:
            return 0
        record = await app.engine.fetch_player(SIMULATED_PLAYER)
        if record is None:
            return 0
        required = (cost - record.energy) * record.energy_refill_rate_ms
        return max(0, required - elapsed_ms(record.last_energy_update, clock()))
