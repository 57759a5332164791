import asyncio

import pytest

from playforge import AssetKind, EconomyApp, PlayForgeConfig
from playforge.clock import FrozenClock
from playforge.storage.memory import InMemoryLevelStore, InMemoryPlayerStore


class SlowPlayerStore(InMemoryPlayerStore):
    """Yields to the event loop between reading and returning a record."""

    async def fetch(self, player_id):
        record = await super().fetch(player_id)
        await asyncio.sleep(0)
        return record


def build_app(serialize: bool) -> EconomyApp:
    return EconomyApp(
        PlayForgeConfig(serialize_player_writes=serialize),
        player_store=SlowPlayerStore(),
        level_store=InMemoryLevelStore(),
        clock=FrozenClock(),
    )


async def funded_player(app: EconomyApp, balance: int) -> None:
    await app.engine.initialize("p")
    await app.engine.credit_external_redemption("p", balance)


@pytest.mark.asyncio()
async def test_unserialized_purchases_lose_an_update():
    app = build_app(serialize=False)
    await funded_player(app, 60)
    results = await asyncio.gather(
        app.engine.purchase_asset("p", AssetKind.SHOW_AVAILABLE_MOVES),
        app.engine.purchase_asset("p", AssetKind.SHOW_AVAILABLE_MOVES),
    )
    assert results == [True, True]
    record = await app.engine.fetch_player("p")
    # Both writes were computed from the same stale read.
    assert record.balance == 30
    assert record.assets["showAvailableMoves"] == 1


@pytest.mark.asyncio()
async def test_serialized_purchases_apply_in_turn():
    app = build_app(serialize=True)
    await funded_player(app, 60)
    results = await asyncio.gather(
        app.engine.purchase_asset("p", AssetKind.SHOW_AVAILABLE_MOVES),
        app.engine.purchase_asset("p", AssetKind.SHOW_AVAILABLE_MOVES),
    )
    assert results == [True, True]
    record = await app.engine.fetch_player("p")
    assert record.balance == 0
    assert record.assets["showAvailableMoves"] == 2
    assert len(app.locks) == 0


@pytest.mark.asyncio()
async def test_serialized_purchases_never_overdraw():
    app = build_app(serialize=True)
    await funded_player(app, 50)
    results = await asyncio.gather(
        app.engine.purchase_asset("p", AssetKind.SHOW_AVAILABLE_MOVES),
        app.engine.purchase_asset("p", AssetKind.SHOW_AVAILABLE_MOVES),
    )
    assert sorted(results) == [False, True]
    record = await app.engine.fetch_player("p")
    assert record.balance == 20
    assert record.assets["showAvailableMoves"] == 1


@pytest.mark.asyncio()
async def test_serialized_referrals_are_all_counted():
    app = build_app(serialize=True)
    await app.engine.initialize("ref")
    await asyncio.gather(
        *(app.engine.initialize(f"friend-{index}", "ref") for index in range(4))
    )
    referrer = await app.engine.fetch_player("ref")
    assert referrer.number_of_refs == 4
    assert referrer.referral_multiplier == pytest.approx(1.4)


@pytest.mark.asyncio()
async def test_serialized_listener_can_call_back_into_engine():
    app = build_app(serialize=True)
    await app.engine.initialize("p")
    seen = []

    async def spend_on_credit(record):
        seen.append((record.balance, record.energy))
        if len(seen) == 1:
            await app.engine.spend_energy("p", 1)

    app.engine.on_player_change("p", spend_on_credit)
    credited = await asyncio.wait_for(app.engine.credit_external_redemption("p", 5), timeout=2)

    assert credited is True
    assert seen == [(5, 100), (5, 99)]
    assert len(app.locks) == 0
