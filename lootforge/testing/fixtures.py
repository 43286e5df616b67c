"""Pytest fixtures for LootForge."""

from __future__ import annotations

from datetime import date

import pytest

from ..app import LootApp
from ..config import GachaConfig, LootForgeConfig
from .scheduling import ManualScheduler

TEST_DAY = date(2024, 1, 1)


@pytest.fixture()
def memory_app() -> LootApp:
    return app_fixture()


def app_fixture(
    bot_token: str = "test",
    *,
    starting_balance: float = 10_000.0,
    seed: int = 7,
    **kwargs,
) -> LootApp:
    """Helper for ad-hoc tests where pytest is not available."""
    config = LootForgeConfig(
        bot_token=bot_token,
        gacha=GachaConfig(starting_balance=starting_balance),
        rng_seed=seed,
    )
    kwargs.setdefault("scheduler", ManualScheduler())
    kwargs.setdefault("today", lambda: TEST_DAY)
    return LootApp(config, **kwargs)
