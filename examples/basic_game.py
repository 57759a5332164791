"""Example backend flow: players join, play levels, buy hints and redeem tokens."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from playforge import AssetKind, EconomyApp, PlayForgeConfig
from playforge.loaders import load_levels_from_json
from playforge.storage import PlayerRecord

LEVELS_PATH = Path(__file__).with_name("levels") / "levels.json"


async def print_snapshot(record: PlayerRecord) -> None:
    print(
        f"[{record.player_id}] balance={record.balance} energy={record.energy} "
        f"level={record.current_level_id} assets={record.assets}"
    )


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    app = EconomyApp(PlayForgeConfig.from_env())
    await app.init_backend()
    await load_levels_from_json(app.levels, LEVELS_PATH)

    engine = app.engine
    await engine.initialize("1001")
    await engine.initialize("1002", referral_code="1001")
    unsubscribe = engine.on_player_change("1002", print_snapshot)

    for level_id in (1, 2, 3):
        level = await app.levels.fetch_level(level_id)
        if level is None:
            break
        await engine.spend_energy("1002", level.energy_cost)
        await app.levels.complete(engine, "1002", level_id)

    await engine.credit_external_redemption("1002", 100)
    if await engine.purchase_asset("1002", AssetKind.SHOW_AVAILABLE_MOVES):
        await engine.activate_boost("1002", AssetKind.SHOW_AVAILABLE_MOVES)
    print("Active boosts:", await engine.get_active_boosts("1002"))
    unsubscribe()
    await app.close()


if __name__ == "__main__":
    asyncio.run(main())
