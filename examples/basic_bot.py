"""Example LootForge bot with a small reward list."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from lootforge import LootApp, LootForgeConfig
from lootforge.diagnostics import DrawSimulator
from lootforge.loaders import load_rewards_from_json


def register(app: LootApp) -> None:
    """Register the master reward list."""
    load_rewards_from_json(app, Path(__file__).with_name("rewards") / "rewards.json")


async def simulate() -> None:
    app = LootApp(LootForgeConfig.from_env())
    register(app)
    await app.refresh_catalog()
    result = DrawSimulator(app).simulate(draws=1_000)
    for tier, count in sorted(result.tiers.items()):
        print(f"{tier.label}: {count}")


async def run_bot() -> None:
    from aiogram import Bot, Dispatcher
    from lootforge.telegram import build_router

    logging.basicConfig(level=logging.INFO)
    app = LootApp(LootForgeConfig.from_env())
    register(app)
    await app.init_backend()
    await app.refresh_catalog()

    bot = Bot(app.config.bot_token)
    dp = Dispatcher()
    dp.include_router(build_router(app))
    try:
        await dp.start_polling(bot)
    finally:
        await app.close()


if __name__ == "__main__":
    asyncio.run(run_bot())
