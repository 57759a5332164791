"""Factories for tests and prototyping."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from random import Random
from typing import Iterable

from faker import Faker

from ..domain.assets import empty_assets
from ..domain.levels import LevelDefinition
from ..storage.base import PlayerRecord


@dataclass(slots=True)
class PlayerRecordFactory:
    faker: Faker = field(default_factory=Faker)

    def build(
        self,
        player_id: str | None = None,
        *,
        now: datetime | None = None,
        **overrides,
    ) -> PlayerRecord:
        player_id = player_id or str(self.faker.unique.random_int(min=10_000, max=99_999_999))
        record = PlayerRecord(
            player_id=player_id,
            last_energy_update=now or datetime.now(timezone.utc),
            assets=empty_assets(),
        )
        for name, value in overrides.items():
            setattr(record, name, value)
        return record


@dataclass(slots=True)
class LevelFactory:
    faker: Faker = field(default_factory=Faker)
    rng: Random = field(default_factory=Random)

    def build(self, level_id: int, *, reward: int | None = None, energy_cost: int | None = None) -> LevelDefinition:
        return LevelDefinition(
            level_id=level_id,
            name=self.faker.word().title(),
            reward=reward if reward is not None else self.rng.randint(5, 50),
            energy_cost=energy_cost if energy_cost is not None else self.rng.randint(1, 10),
        )

    def batch(self, count: int, *, start: int = 1) -> Iterable[LevelDefinition]:
        for level_id in range(start, start + count):
            yield self.build(level_id)
