from datetime import datetime, timezone
from random import Random
from unittest.mock import AsyncMock

import pytest

from lootforge.domain.crafting import TradeUpProgress
from lootforge.domain.exceptions import InsufficientBalance, InsufficientSourceItems
from lootforge.domain.player import PlayerProfile
from lootforge.domain.rewards import ItemView, Tier
from lootforge.storage.base import GachaHistoryRecord
from lootforge.telegram.keyboards import trade_up_keyboard
from lootforge.telegram.router import (
    describe_error,
    format_balance_message,
    format_history_message,
    format_locker_message,
    format_progress,
    format_strip_frame,
    parse_tier_argument,
    play_reveal,
    reveal_positions,
)
from lootforge.testing import InventoryFactory, RewardFactory, app_fixture


def _views(*images: str) -> list[ItemView]:
    return [ItemView(f"r{idx}", f"Item {idx}", image, Tier.COMMON) for idx, image in enumerate(images)]


def test_format_strip_frame_marks_centre():
    strip = _views("a", "b", "c", "d", "e", "f")
    assert format_strip_frame(strip, 2) == "🎰 a b [c] d e\n▶ Item 2"
    assert format_strip_frame(strip, 0).startswith("🎰 ▫️ ▫️ [a] b c")
    assert format_strip_frame(strip, 99).endswith("▶ Item 5")


@pytest.mark.parametrize("frames", [1, 5, 12, 40])
def test_reveal_positions_decelerate_onto_target(frames):
    positions = reveal_positions(85, frames)
    assert len(positions) == frames
    assert positions[-1] == 85
    assert positions == sorted(positions)


def test_format_balance_message_lists_owned_tiers():
    profile = PlayerProfile(
        user_id=1,
        username="tester",
        balance=2500,
        tier_counts={Tier.LEGENDARY: 0, Tier.RARE: 1, Tier.UNCOMMON: 0, Tier.COMMON: 3},
        item_count=4,
    )
    text = format_balance_message(profile, draw_cost=1000)
    assert "tester" in text
    assert "Balance: 2500" in text
    assert "Rare: 1" in text and "Common: 3" in text
    assert "Legendary" not in text


def test_format_locker_message_truncates():
    items = InventoryFactory().batch(25)
    text = format_locker_message(items)
    assert items[0].name in text
    assert text.endswith("…and 5 more")
    assert "empty" in format_locker_message([])


def test_format_progress_and_keyboard():
    progress = [
        TradeUpProgress(Tier.UNCOMMON, Tier.COMMON, available=8, required=6),
        TradeUpProgress(Tier.RARE, Tier.UNCOMMON, available=2, required=10),
    ]
    text = format_progress(progress)
    assert "✅ Common → Uncommon: 6/6" in text
    assert "⏳ Uncommon → Rare: 2/10" in text
    keyboard = trade_up_keyboard(progress)
    assert [row[0].callback_data for row in keyboard.inline_keyboard] == ["lootforge:craft:3"]
    assert trade_up_keyboard(progress[1:]) is None


def test_format_history_message():
    when = datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc)
    records = [
        GachaHistoryRecord(1, "craft", "gem", "Gem", 2, when, consumed_ids=("a",) * 10),
        GachaHistoryRecord(1, "draw", "clover", "Clover", 4, when, cost=1000),
    ]
    text = format_history_message(records)
    assert "2024-01-02 03:04 ⚒️ Gem [Rare] from 10 items" in text
    assert "🎰 Clover [Common] −1000" in text
    assert format_history_message([]) == "No draws yet."


def test_describe_error():
    assert "1000" in describe_error(InsufficientBalance(10, 1000))
    assert "6 Common" in describe_error(InsufficientSourceItems(4, 6, 2))


@pytest.mark.parametrize(
    ("text", "tier"),
    [("/craft 3", Tier.UNCOMMON), ("1", Tier.LEGENDARY), ("/craft 4", None), ("/craft", None), (None, None)],
)
def test_parse_tier_argument(text, tier):
    assert parse_tier_argument(text) is tier


@pytest.mark.asyncio()
async def test_play_reveal_stops_after_skip():
    app = app_fixture()
    app.register_rewards(RewardFactory(rng=Random(3)).batch(5, Tier.COMMON))
    await app.refresh_catalog()
    engine = app.engine_for(1)
    plan = (await engine.draw()).unwrap().reveal
    message = AsyncMock()
    frames_seen = []

    async def fake_sleep(delay: float) -> None:
        frames_seen.append(delay)
        if len(frames_seen) == 3:
            engine.skip_reveal()

    shown = await play_reveal(message, engine, plan, frames=10, duration=5.0, sleep=fake_sleep)

    assert shown == 3
    assert frames_seen == [0.5, 0.5, 0.5]
    assert message.edit_text.await_count == 3
