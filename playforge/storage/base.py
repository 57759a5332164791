"""Storage abstractions used by the PlayForge services."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Protocol

if TYPE_CHECKING:
    from ..domain.levels import LevelDefinition


@dataclass(slots=True)
class ActiveBoost:
    expires_at: datetime


@dataclass(slots=True)
class PlayerRecord:
    player_id: str
    wallet_address: str = ""
    balance: int = 0
    energy: int = 100
    last_energy_update: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    energy_refill_rate_ms: int = 60_000
    assets: dict[str, int] = field(default_factory=dict)
    active_boosts: dict[str, ActiveBoost] = field(default_factory=dict)
    current_level_id: int = 1
    number_of_refs: int = 0
    referral_multiplier: float = 1.0
    referred_by: str | None = None

    def copy(self) -> "PlayerRecord":
        return deepcopy(self)


PLAYER_FIELDS = frozenset(f.name for f in fields(PlayerRecord)) - {"player_id"}

PlayerListener = Callable[[PlayerRecord], Awaitable[None]]
Unsubscribe = Callable[[], None]


def check_fields(values: Mapping[str, Any]) -> None:
    unknown = set(values) - PLAYER_FIELDS
    if unknown:
        raise KeyError(f"Unknown player fields: {', '.join(sorted(unknown))}")


class PlayerStore(Protocol):
    async def fetch(self, player_id: str) -> PlayerRecord | None:
        ...

    async def persist(self, record: PlayerRecord) -> None:
        ...

    async def update(self, player_id: str, values: Mapping[str, Any]) -> None:
        ...

    def subscribe(self, player_id: str, listener: PlayerListener) -> Unsubscribe:
        ...


class LevelStore(Protocol):
    async def fetch_level(self, level_id: int) -> "LevelDefinition | None":
        ...

    async def save_level(self, level: "LevelDefinition") -> None:
        ...
