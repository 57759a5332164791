"""Player economy rules: energy, coins, assets, boosts, referrals and levels."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, AsyncIterator

from . import events
from ..clock import Clock, utc_now
from .assets import AssetKind, asset_cost, empty_assets, resolve_asset
from .boosts import filter_active, with_boost
from .economy import Wallet, scaled_reward
from .energy import clamp_energy, compute_energy_refill, ensure_utc, regenerated_energy
from .events import EventBus
from .locks import PlayerLocks
from .outcomes import Outcome, SkipReason
from .referrals import initial_multiplier, normalize_referral_code, stepped_multiplier
from ..storage.base import ActiveBoost, PlayerListener, PlayerRecord, PlayerStore, Unsubscribe
from ..storage.notifier import deferred_snapshots

if TYPE_CHECKING:
    from ..config import EconomyConfig

logger = logging.getLogger(__name__)


class EconomyEngine:
    """Read, derive and mutate one player's economic record at a time.

    Every operation is a fetch-mutate-update sequence against the player
    store. Without ``locks`` two concurrent operations on the same player can
    both read the same record and the later write wins. Passing
    :class:`PlayerLocks` serializes operations per player id.

    Each operation has a ``try_`` form returning an :class:`Outcome` and a
    plain form with the boolean/int contract used by clients, which reports
    a missing player the same way as any other failure.
    """

    def __init__(
        self,
        store: PlayerStore,
        config: "EconomyConfig",
        *,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        locks: PlayerLocks | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._events = event_bus or EventBus()
        self._clock = clock or utc_now
        self._locks = locks

    @property
    def config(self) -> "EconomyConfig":
        return self._config

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    @asynccontextmanager
    async def _guard(self, player_id: str) -> AsyncIterator[None]:
        # Snapshots go out after the player lock is released, so listeners may
        # call back into the engine for the same player.
        async with deferred_snapshots():
            if self._locks is None:
                yield
            else:
                async with self._locks.hold(player_id):
                    yield

    def _missing(self, player_id: str, operation: str, value: object) -> Outcome:
        logger.warning("%s skipped: player %s not found", operation, player_id)
        return Outcome.skipped(SkipReason.NOT_FOUND, value=value, detail=player_id)

    # -- creation and referrals ------------------------------------------

    async def try_initialize(self, player_id: str, referral_code: str | None = None) -> Outcome:
        code = normalize_referral_code(referral_code)
        async with self._guard(player_id):
            if await self._store.fetch(player_id) is not None:
                logger.debug("Player %s already initialized", player_id)
                return Outcome.skipped(SkipReason.ALREADY_EXISTS, detail=player_id)

            referrer_exists = False
            if code and code != player_id:
                referrer_exists = await self._store.fetch(code) is not None

            record = PlayerRecord(
                player_id=player_id,
                energy=self._config.max_energy,
                last_energy_update=self.now(),
                energy_refill_rate_ms=self._config.default_energy_refill_rate_ms,
                assets=empty_assets(),
                referral_multiplier=initial_multiplier(
                    referrer_exists,
                    self._config.referral_multiplier_step,
                    self._config.max_referral_multiplier,
                ),
                referred_by=code,
            )
            await self._store.persist(record)

        logger.info("Created player %s (referred by %s)", player_id, code)
        await self._events.publish(
            events.PLAYER_CREATED, {"player_id": player_id, "referred_by": code}
        )
        # The new player's lock is released first so mutual referrals cannot deadlock.
        if referrer_exists and code:
            await self._credit_referrer(code, player_id)
        return Outcome.applied(record)

    async def initialize(self, player_id: str, referral_code: str | None = None) -> None:
        await self.try_initialize(player_id, referral_code)

    async def _credit_referrer(self, referrer_id: str, referred_id: str) -> None:
        async with self._guard(referrer_id):
            referrer = await self._store.fetch(referrer_id)
            if referrer is None:
                return
            refs = referrer.number_of_refs + 1
            multiplier = stepped_multiplier(
                referrer.referral_multiplier,
                self._config.referral_multiplier_step,
                self._config.max_referral_multiplier,
            )
            await self._store.update(
                referrer_id, {"number_of_refs": refs, "referral_multiplier": multiplier}
            )
        logger.info("Referral credited to %s for %s (x%s)", referrer_id, referred_id, multiplier)
        await self._events.publish(
            events.REFERRAL_CREDITED,
            {
                "player_id": referrer_id,
                "referred_id": referred_id,
                "number_of_refs": refs,
                "referral_multiplier": multiplier,
            },
        )

    # -- energy ----------------------------------------------------------

    def compute_energy_refill(self, record: PlayerRecord, now: datetime | None = None) -> int:
        return compute_energy_refill(record, now or self.now())

    async def current_energy(self, player_id: str) -> int:
        """Energy the player has right now, regeneration included; nothing is stored."""
        record = await self._store.fetch(player_id)
        if record is None:
            return 0
        return regenerated_energy(record, self.now(), self._config.max_energy)

    async def try_spend_energy(self, player_id: str, cost: int) -> Outcome:
        if cost < 0:
            raise ValueError("Energy cost cannot be negative")
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "spend_energy", 0)
            now = self.now()
            refill = compute_energy_refill(record, now)
            energy = clamp_energy(record.energy + refill - cost, self._config.max_energy)
            await self._store.update(player_id, {"energy": energy, "last_energy_update": now})

        await self._events.publish(
            events.ENERGY_SPENT,
            {"player_id": player_id, "cost": cost, "refill": refill, "energy": energy},
        )
        return Outcome.applied(energy)

    async def spend_energy(self, player_id: str, cost: int) -> int:
        """Spend ``cost`` energy and return what is left; never fails, clamps at 0."""
        return (await self.try_spend_energy(player_id, cost)).value

    async def try_refill_energy(self, player_id: str) -> Outcome:
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "refill_energy", False)
            now = self.now()
            energy = regenerated_energy(record, now, self._config.max_energy)
            needed = self._config.max_energy - energy
            if needed <= 0:
                return Outcome.skipped(SkipReason.ENERGY_FULL, value=0)

            total_cost = needed * self._config.cost_per_energy
            wallet = Wallet(balance=record.balance)
            if not wallet.can_afford(total_cost):
                logger.debug(
                    "Refill for %s rejected: balance %s < %s", player_id, record.balance, total_cost
                )
                return Outcome.skipped(
                    SkipReason.INSUFFICIENT_FUNDS,
                    detail=f"refill costs {total_cost}, balance is {record.balance}",
                )
            wallet.debit(total_cost)
            await self._store.update(
                player_id,
                {
                    "balance": wallet.balance,
                    "energy": self._config.max_energy,
                    "last_energy_update": now,
                },
            )

        await self._events.publish(
            events.ENERGY_REFILLED,
            {"player_id": player_id, "energy_added": needed, "cost": total_cost},
        )
        return Outcome.applied(total_cost)

    async def refill_energy(self, player_id: str) -> bool:
        return (await self.try_refill_energy(player_id)).succeeded

    # -- levels ----------------------------------------------------------

    async def try_complete_level(self, player_id: str, level_id: int, reward: int) -> Outcome:
        if reward < 0:
            raise ValueError("Level reward cannot be negative")
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "complete_level", None)
            if record.current_level_id != level_id:
                logger.debug(
                    "Ignoring completion of level %s for %s (current level %s)",
                    level_id,
                    player_id,
                    record.current_level_id,
                )
                return Outcome.skipped(
                    SkipReason.INVALID_TRANSITION,
                    detail=f"player {player_id} is on level {record.current_level_id}, not {level_id}",
                )
            earned = scaled_reward(reward, record.referral_multiplier)
            await self._store.update(
                player_id,
                {
                    "current_level_id": record.current_level_id + 1,
                    "balance": record.balance + earned,
                },
            )

        await self._events.publish(
            events.LEVEL_COMPLETED,
            {"player_id": player_id, "level_id": level_id, "reward": reward, "earned": earned},
        )
        return Outcome.applied(earned)

    async def complete_level(self, player_id: str, level_id: int, reward: int) -> None:
        await self.try_complete_level(player_id, level_id, reward)

    # -- assets and boosts -----------------------------------------------

    async def try_purchase_asset(self, player_id: str, asset_type: AssetKind | str) -> Outcome:
        kind = resolve_asset(asset_type)
        cost = asset_cost(self._config.asset_costs, kind)
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "purchase_asset", False)
            wallet = Wallet(balance=record.balance)
            if not wallet.can_afford(cost):
                return Outcome.skipped(
                    SkipReason.INSUFFICIENT_FUNDS,
                    detail=f"{kind.value} costs {cost}, balance is {record.balance}",
                )
            wallet.debit(cost)
            assets = dict(record.assets)
            assets[kind.value] = assets.get(kind.value, 0) + 1
            await self._store.update(player_id, {"balance": wallet.balance, "assets": assets})

        await self._events.publish(
            events.ASSET_PURCHASED,
            {"player_id": player_id, "asset": kind.value, "cost": cost, "owned": assets[kind.value]},
        )
        return Outcome.applied(assets[kind.value])

    async def purchase_asset(self, player_id: str, asset_type: AssetKind | str) -> bool:
        return (await self.try_purchase_asset(player_id, asset_type)).succeeded

    async def try_activate_boost(self, player_id: str, boost_type: AssetKind | str) -> Outcome:
        kind = resolve_asset(boost_type)
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "activate_boost", False)
            owned = record.assets.get(kind.value, 0)
            if owned <= 0:
                return Outcome.skipped(
                    SkipReason.INSUFFICIENT_ASSET, detail=f"no {kind.value} left"
                )
            assets = dict(record.assets)
            assets[kind.value] = owned - 1
            boosts = with_boost(
                record.active_boosts, kind.value, self.now(), self._config.boost_duration_seconds
            )
            await self._store.update(player_id, {"assets": assets, "active_boosts": boosts})

        boost = boosts[kind.value]
        await self._events.publish(
            events.BOOST_ACTIVATED,
            {"player_id": player_id, "boost": kind.value, "expires_at": boost.expires_at.isoformat()},
        )
        return Outcome.applied(boost)

    async def activate_boost(self, player_id: str, boost_type: AssetKind | str) -> bool:
        return (await self.try_activate_boost(player_id, boost_type)).succeeded

    async def get_active_boosts(self, player_id: str) -> dict[str, ActiveBoost]:
        record = await self._store.fetch(player_id)
        if record is None:
            return {}
        return filter_active(record.active_boosts, self.now())

    # -- external credits and wallet -------------------------------------

    async def try_credit_external_redemption(self, player_id: str, amount: int) -> Outcome:
        # Provenance of ``amount`` (a verified burn) is the caller's concern.
        if amount < 0:
            raise ValueError("Redemption amount cannot be negative")
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "credit_external_redemption", False)
            wallet = Wallet(balance=record.balance)
            wallet.credit(amount)
            await self._store.update(player_id, {"balance": wallet.balance})

        logger.info("Credited %s coins to %s from external redemption", amount, player_id)
        await self._events.publish(
            events.REDEMPTION_CREDITED,
            {"player_id": player_id, "amount": amount, "balance": wallet.balance},
        )
        return Outcome.applied(wallet.balance)

    async def credit_external_redemption(self, player_id: str, amount: int) -> bool:
        return (await self.try_credit_external_redemption(player_id, amount)).succeeded

    async def try_update_wallet_address(self, player_id: str, address: str) -> Outcome:
        async with self._guard(player_id):
            record = await self._store.fetch(player_id)
            if record is None:
                return self._missing(player_id, "update_wallet_address", False)
            await self._store.update(player_id, {"wallet_address": address})

        await self._events.publish(
            events.WALLET_LINKED, {"player_id": player_id, "wallet_address": address}
        )
        return Outcome.applied(address)

    async def update_wallet_address(self, player_id: str, address: str) -> bool:
        return (await self.try_update_wallet_address(player_id, address)).succeeded

    # -- reads and subscriptions -----------------------------------------

    async def fetch_player(self, player_id: str) -> PlayerRecord | None:
        return await self._store.fetch(player_id)

    def on_player_change(self, player_id: str, listener: PlayerListener) -> Unsubscribe:
        """Receive a full snapshot after every write to the player's record."""
        return self._store.subscribe(player_id, listener)
