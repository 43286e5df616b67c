from datetime import date
from pathlib import Path
from random import Random

import pytest

from lootforge.app import LootApp
from lootforge.config import GachaConfig, LootForgeConfig, StorageConfig
from lootforge.domain.rewards import Tier
from lootforge.storage import AsyncSQLAlchemyStorage, GachaHistoryRecord
from lootforge.testing import InventoryFactory, ManualScheduler, RewardFactory


def _dsn(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'lootforge.db'}"


@pytest.mark.asyncio()
async def test_inventory_keeps_insertion_order_and_applies_deltas(tmp_path: Path):
    storage = AsyncSQLAlchemyStorage(_dsn(tmp_path), starting_balance=50)
    await storage.init_models()
    players = storage.player_store()
    factory = InventoryFactory()
    items = [factory.build(Tier.UNCOMMON), factory.build(Tier.COMMON), factory.build(Tier.RARE)]
    items.append(factory.build(Tier.LEGENDARY))
    try:
        record = await players.get_or_create(7, "tester")
        assert record.balance == 50
        assert record.inventory == []

        await players.persist_inventory_delta(7, balance=40, added=items[:3], removed_ids=())
        await players.persist_inventory_delta(
            7, balance=40, added=items[3:], removed_ids=[items[1].item_id]
        )

        record = await players.get_or_create(7)
        assert record.balance == 40
        assert record.username == "tester"
        assert [item.item_id for item in record.inventory] == [
            items[0].item_id,
            items[2].item_id,
            items[3].item_id,
        ]
        assert record.inventory[0] == items[0]
        assert record.inventory[2].aura_colors == items[3].aura_colors
    finally:
        await storage.dispose()


@pytest.mark.asyncio()
async def test_catalog_replace_and_history(tmp_path: Path):
    storage = AsyncSQLAlchemyStorage(_dsn(tmp_path))
    await storage.init_models()
    catalog = storage.catalog_store()
    history = storage.history_store()
    pool = list(RewardFactory(rng=Random(1)).batch(4))
    try:
        empty = await catalog.load()
        assert list(empty.definitions) == []
        assert empty.refreshed_on is None

        await catalog.replace(pool, date(2024, 1, 1))
        await catalog.replace(pool[:2], date(2024, 1, 2))
        snapshot = await catalog.load()
        assert list(snapshot.definitions) == pool[:2]
        assert snapshot.refreshed_on == date(2024, 1, 2)

        item = InventoryFactory().build(Tier.COMMON)
        for action in ("draw", "craft"):
            await history.add_record(
                GachaHistoryRecord(
                    user_id=1,
                    action=action,
                    reward_id=item.reward_id,
                    reward_name=item.name,
                    tier=int(item.tier),
                    timestamp=item.acquired_at,
                    consumed_ids=("a", "b") if action == "craft" else (),
                )
            )
        records = await history.recent_for_user(1)
        assert [record.action for record in records] == ["craft", "draw"]
        assert records[0].consumed_ids == ("a", "b")
        assert records[1].timestamp == item.acquired_at
        assert await history.recent_for_user(2) == []
    finally:
        await storage.dispose()


@pytest.mark.asyncio()
async def test_app_restores_daily_pool_from_database(tmp_path: Path):
    config = LootForgeConfig(
        bot_token="test",
        storage=StorageConfig(backend="sqlalchemy", dsn=_dsn(tmp_path)),
        gacha=GachaConfig(starting_balance=5_000),
    )
    day = date(2024, 6, 1)
    app = LootApp(config, scheduler=ManualScheduler(), today=lambda: day)
    app.register_rewards(RewardFactory(rng=Random(2)).batch(6, Tier.COMMON))
    await app.init_backend()
    await app.refresh_catalog()
    drawn = (await app.engine_for(1).draw()).unwrap()
    pool = app.catalog.all()
    await app.close()

    restored = LootApp(config, scheduler=ManualScheduler(), today=lambda: day)
    await restored.init_backend()
    try:
        assert restored.catalog.all() == pool
        assert not await restored.refresh_catalog()
        locker = await restored.player_service.locker(1)
        assert [item.item_id for item in locker] == [drawn.item.item_id]
        assert (await restored.player_service.fetch(1)).balance == 4_000
    finally:
        await restored.close()
