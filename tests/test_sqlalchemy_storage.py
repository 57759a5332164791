from datetime import timedelta, timezone

import pytest

from playforge import AssetKind, EconomyApp, PlayForgeConfig
from playforge.clock import FrozenClock
from playforge.config import StorageConfig
from playforge.domain.levels import LevelDefinition


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def sql_app(tmp_path, clock):
    config = PlayForgeConfig(
        storage=StorageConfig(
            backend="sqlalchemy", dsn=f"sqlite+aiosqlite:///{(tmp_path / 'playforge.db').as_posix()}"
        )
    )
    return EconomyApp(config, clock=clock)


@pytest.mark.asyncio()
async def test_player_round_trip(sql_app, clock):
    await sql_app.init_backend()
    try:
        await sql_app.engine.initialize("ref")
        await sql_app.engine.initialize("p", "ref")
        await sql_app.engine.credit_external_redemption("p", 100)
        assert await sql_app.engine.purchase_asset("p", AssetKind.AI_ASSISTANT)
        assert await sql_app.engine.activate_boost("p", AssetKind.AI_ASSISTANT)

        record = await sql_app.engine.fetch_player("p")
        assert record.balance == 50
        assert record.assets == {"showAvailableMoves": 0, "aiAssistant": 0}
        assert record.referred_by == "ref"
        assert record.referral_multiplier == pytest.approx(1.1)
        assert record.last_energy_update == clock()
        assert record.last_energy_update.tzinfo == timezone.utc
        boost = record.active_boosts["aiAssistant"]
        assert boost.expires_at == clock() + timedelta(seconds=60)

        referrer = await sql_app.engine.fetch_player("ref")
        assert referrer.number_of_refs == 1
    finally:
        await sql_app.close()


@pytest.mark.asyncio()
async def test_energy_survives_naive_storage(sql_app, clock):
    await sql_app.init_backend()
    try:
        await sql_app.engine.initialize("p")
        await sql_app.engine.spend_energy("p", 30)
        clock.advance(minutes=10)
        assert await sql_app.engine.current_energy("p") == 80
    finally:
        await sql_app.close()


@pytest.mark.asyncio()
async def test_update_missing_player_raises(sql_app):
    await sql_app.init_backend()
    try:
        with pytest.raises(KeyError):
            await sql_app.player_store.update("ghost", {"balance": 1})
        assert await sql_app.engine.fetch_player("ghost") is None
    finally:
        await sql_app.close()


@pytest.mark.asyncio()
async def test_subscribers_receive_snapshots(sql_app):
    await sql_app.init_backend()
    try:
        balances = []

        async def listener(record):
            balances.append(record.balance)

        await sql_app.engine.initialize("p")
        sql_app.engine.on_player_change("p", listener)
        await sql_app.engine.credit_external_redemption("p", 7)
        assert balances == [7]
    finally:
        await sql_app.close()


@pytest.mark.asyncio()
async def test_levels_round_trip(sql_app):
    await sql_app.init_backend()
    try:
        await sql_app.levels.register(
            LevelDefinition(level_id=3, name="Maze", reward=15, energy_cost=8, metadata={"grid": [5, 5]})
        )
        level = await sql_app.levels.fetch_level(3)
        assert level == LevelDefinition(
            level_id=3, name="Maze", reward=15, energy_cost=8, metadata={"grid": [5, 5]}
        )
        assert await sql_app.levels.fetch_level(4) is None
    finally:
        await sql_app.close()
