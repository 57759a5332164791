from datetime import datetime, timedelta, timezone

import pytest

from playforge import EconomyApp, PlayForgeConfig
from playforge.clock import FrozenClock
from playforge.domain.energy import compute_energy_refill, ensure_utc
from playforge.domain.exceptions import PlayerNotFound
from playforge.domain.outcomes import SkipReason
from playforge.testing import PlayerRecordFactory

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def clock():
    return FrozenClock(NOW)


@pytest.fixture()
def app(clock):
    return EconomyApp(PlayForgeConfig(), clock=clock)


async def seed(app, player_id="42", **overrides):
    record = PlayerRecordFactory().build(player_id, now=NOW, **overrides)
    await app.player_store.persist(record)
    return record


def test_refill_counts_whole_units_only():
    record = PlayerRecordFactory().build(
        "1", now=NOW - timedelta(milliseconds=299_999), energy_refill_rate_ms=60_000
    )
    assert compute_energy_refill(record, NOW) == 4


@pytest.mark.parametrize("rate_ms", [1001, 1337, 2999])
@pytest.mark.parametrize("units", [1, 3, 7, 250])
def test_refill_is_exact_for_millisecond_rates(rate_ms, units):
    record = PlayerRecordFactory().build(
        "1", now=NOW - timedelta(milliseconds=rate_ms * units), energy_refill_rate_ms=rate_ms
    )
    assert compute_energy_refill(record, NOW) == units

    record.last_energy_update = NOW - timedelta(milliseconds=rate_ms * units - 1)
    assert compute_energy_refill(record, NOW) == units - 1


def test_refill_ignores_baseline_in_the_future():
    record = PlayerRecordFactory().build("1", now=NOW + timedelta(minutes=5))
    assert compute_energy_refill(record, NOW) == 0


def test_refill_treats_naive_timestamps_as_utc():
    record = PlayerRecordFactory().build("1", now=(NOW - timedelta(minutes=2)).replace(tzinfo=None))
    assert compute_energy_refill(record, NOW) == 2


def test_ensure_utc_converts_offsets():
    moscow = timezone(timedelta(hours=3))
    converted = ensure_utc(datetime(2024, 5, 1, 15, 0, tzinfo=moscow))
    assert converted == NOW
    assert converted.tzinfo == timezone.utc


@pytest.mark.asyncio()
async def test_spend_energy_applies_lazy_regeneration(app):
    await seed(
        app,
        energy=10,
        last_energy_update=NOW - timedelta(milliseconds=300_000),
        energy_refill_rate_ms=60_000,
    )
    assert await app.engine.spend_energy("42", 3) == 12
    record = await app.player_store.fetch("42")
    assert record.energy == 12
    assert record.last_energy_update == NOW


@pytest.mark.asyncio()
async def test_spend_energy_clamps_at_zero(app):
    await seed(app, energy=5)
    assert await app.engine.spend_energy("42", 50) == 0


@pytest.mark.asyncio()
async def test_spend_energy_clamps_at_max(app):
    await seed(app, energy=100, last_energy_update=NOW - timedelta(hours=1))
    assert await app.engine.spend_energy("42", 1) == 100


@pytest.mark.asyncio()
@pytest.mark.parametrize("cost", [0, 1, 50, 100, 250])
@pytest.mark.parametrize("elapsed_minutes", [0, 3, 500])
async def test_spend_energy_stays_in_range(app, cost, elapsed_minutes):
    await seed(app, energy=37, last_energy_update=NOW - timedelta(minutes=elapsed_minutes))
    energy = await app.engine.spend_energy("42", cost)
    assert 0 <= energy <= 100


@pytest.mark.asyncio()
async def test_spend_energy_for_missing_player_returns_zero(app):
    assert await app.engine.spend_energy("ghost", 5) == 0
    outcome = await app.engine.try_spend_energy("ghost", 5)
    assert outcome.reason is SkipReason.NOT_FOUND
    with pytest.raises(PlayerNotFound):
        outcome.unwrap()


@pytest.mark.asyncio()
async def test_spend_energy_rejects_negative_cost(app):
    await seed(app)
    with pytest.raises(ValueError):
        await app.engine.spend_energy("42", -1)


@pytest.mark.asyncio()
async def test_refill_energy_charges_for_missing_energy(app):
    await seed(app, balance=300, energy=40)
    assert await app.engine.refill_energy("42") is True
    record = await app.player_store.fetch("42")
    assert record.energy == 100
    assert record.balance == 300 - 60 * 3
    assert record.last_energy_update == NOW


@pytest.mark.asyncio()
async def test_refill_energy_when_full_changes_nothing(app, clock):
    baseline = NOW - timedelta(seconds=10)
    await seed(app, balance=50, energy=100, last_energy_update=baseline)
    assert await app.engine.refill_energy("42") is True
    record = await app.player_store.fetch("42")
    assert record.balance == 50
    assert record.last_energy_update == baseline


@pytest.mark.asyncio()
async def test_refill_energy_counts_regenerated_energy(app):
    await seed(app, balance=100, energy=90, last_energy_update=NOW - timedelta(minutes=5))
    outcome = await app.engine.try_refill_energy("42")
    assert outcome.unwrap() == 5 * 3
    record = await app.player_store.fetch("42")
    assert record.balance == 85


@pytest.mark.asyncio()
async def test_refill_energy_rejected_when_unaffordable(app):
    await seed(app, balance=10, energy=0)
    assert await app.engine.refill_energy("42") is False
    record = await app.player_store.fetch("42")
    assert record.balance == 10
    assert record.energy == 0


@pytest.mark.asyncio()
async def test_current_energy_is_a_projection(app, clock):
    await seed(app, energy=20)
    clock.advance(minutes=7)
    assert await app.engine.current_energy("42") == 27
    record = await app.player_store.fetch("42")
    assert record.energy == 20
    assert await app.engine.current_energy("ghost") == 0
