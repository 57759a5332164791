"""Configuration models for PlayForge."""

from __future__ import annotations

import os
import json
from dataclasses import dataclass, field
from typing import Literal, Mapping

from .domain.assets import DEFAULT_ASSET_COSTS


StorageBackend = Literal["memory", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure how player records and level content are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./playforge.db"
        return None


@dataclass(slots=True)
class EconomyConfig:
    """Prices and rates of the player economy."""

    max_energy: int = 100
    default_energy_refill_rate_ms: int = 60_000
    cost_per_energy: int = 3
    boost_duration_seconds: int = 60
    referral_multiplier_step: float = 0.1
    max_referral_multiplier: float = 2.0
    asset_costs: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_ASSET_COSTS))


@dataclass(slots=True)
class PlayForgeConfig:
    """Top-level configuration container."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    serialize_player_writes: bool = False

    @classmethod
    def from_env(cls) -> "PlayForgeConfig":
        """Create config from environment variables prefixed with PLAYFORGE_."""
        prefix = "PLAYFORGE_"
        defaults = EconomyConfig()

        storage = StorageConfig(
            backend=os.getenv(f"{prefix}STORAGE_BACKEND", "memory"),
            dsn=os.getenv(f"{prefix}STORAGE_DSN"),
            echo_sql=os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY,
        )

        economy = EconomyConfig(
            default_energy_refill_rate_ms=int(
                os.getenv(f"{prefix}ENERGY_REFILL_RATE_MS", str(defaults.default_energy_refill_rate_ms))
            ),
            cost_per_energy=int(os.getenv(f"{prefix}COST_PER_ENERGY", str(defaults.cost_per_energy))),
            boost_duration_seconds=int(
                os.getenv(f"{prefix}BOOST_DURATION", str(defaults.boost_duration_seconds))
            ),
            referral_multiplier_step=float(
                os.getenv(f"{prefix}REFERRAL_STEP", str(defaults.referral_multiplier_step))
            ),
            max_referral_multiplier=float(
                os.getenv(f"{prefix}MAX_REFERRAL_MULTIPLIER", str(defaults.max_referral_multiplier))
            ),
            asset_costs=_parse_asset_costs(os.getenv(f"{prefix}ASSET_COSTS")),
        )

        return cls(
            storage=storage,
            economy=economy,
            serialize_player_writes=os.getenv(f"{prefix}SERIALIZE_WRITES", "false").lower() in _TRUTHY,
        )


def _parse_asset_costs(raw: str | None) -> Mapping[str, int]:
    if not raw:
        return dict(DEFAULT_ASSET_COSTS)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON for PLAYFORGE_ASSET_COSTS") from exc
    if not isinstance(data, dict):
        raise ValueError("PLAYFORGE_ASSET_COSTS must be a JSON object")
    costs = dict(DEFAULT_ASSET_COSTS)
    costs.update({str(k): int(v) for k, v in data.items()})
    return costs
