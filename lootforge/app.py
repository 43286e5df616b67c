"""Top level application object for LootForge."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from random import Random
from typing import Any, Callable, Iterable

from .config import LootForgeConfig
from .domain.crafting import TradeUpCrafter
from .domain.daily_pool import DailyPoolComposer, is_due
from .domain.events import CATALOG_REFRESHED, EventBus
from .domain.lottery import Lottery
from .domain.player import PlayerService
from .domain.reveal import RevealSequencer
from .domain.rewards import RewardCatalog, RewardDefinition
from .engine import Clock, LootEngine, utc_now
from .scheduling import AsyncioScheduler, Scheduler
from .storage.base import CatalogStore, HistoryStore, PlayerStore
from .storage.memory import InMemoryCatalogStore, InMemoryHistoryStore, InMemoryPlayerStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage

logger = logging.getLogger(__name__)


class LootApp:
    """Central dependency container used by bots, tools, and tests."""

    def __init__(
        self,
        config: LootForgeConfig,
        *,
        player_store: PlayerStore | None = None,
        catalog_store: CatalogStore | None = None,
        history_store: HistoryStore | None = None,
        event_bus: EventBus | None = None,
        rng: Random | None = None,
        scheduler: Scheduler | None = None,
        clock: Clock = utc_now,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.catalog = RewardCatalog()
        self.scheduler = scheduler or AsyncioScheduler()
        self._clock = clock
        self._today = today

        self._rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else Random())

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        (
            self.player_store,
            self.catalog_store,
            self.history_store,
        ) = self._wire_storage(player_store, catalog_store, history_store)

        self.lottery = Lottery(rng=self._rng)
        self.crafter = TradeUpCrafter(rng=self._rng)
        self.sequencer = RevealSequencer(rng=self._rng)
        self.composer = DailyPoolComposer(quotas=config.daily_pool.quotas, rng=self._rng)
        self.player_service = PlayerService(self.player_store)
        self._engines: dict[int, LootEngine] = {}
        self._refresh_lock = asyncio.Lock()

    def _wire_storage(
        self,
        player_store: PlayerStore | None,
        catalog_store: CatalogStore | None,
        history_store: HistoryStore | None,
    ) -> tuple[PlayerStore, CatalogStore, HistoryStore]:
        if player_store and catalog_store and history_store:
            return player_store, catalog_store, history_store

        backend = self.config.storage.backend
        starting_balance = self.config.gacha.starting_balance
        if backend == "memory":
            return (
                player_store or InMemoryPlayerStore(starting_balance=starting_balance),
                catalog_store or InMemoryCatalogStore(),
                history_store or InMemoryHistoryStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(
                dsn, echo=self.config.storage.echo_sql, starting_balance=starting_balance
            )
            self._sqlalchemy_storage = storage
            return (
                player_store or storage.player_store(),
                catalog_store or storage.catalog_store(),
                history_store or storage.history_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def register_rewards(self, definitions: Iterable[RewardDefinition]) -> None:
        """Add definitions to the master list the daily pool is drawn from."""
        self.composer.register_many(definitions)

    def engine_for(self, user_id: int, *, username: str | None = None) -> LootEngine:
        engine = self._engines.get(user_id)
        if engine is None:
            engine = LootEngine(
                user_id,
                config=self.config,
                catalog=self.catalog,
                player_store=self.player_store,
                history_store=self.history_store,
                lottery=self.lottery,
                crafter=self.crafter,
                sequencer=self.sequencer,
                scheduler=self.scheduler,
                event_bus=self.event_bus,
                clock=self._clock,
                username=username,
            )
            self._engines[user_id] = engine
        elif username:
            engine.username = username
        return engine

    async def refresh_catalog(self, *, today: date | None = None, force: bool = False) -> bool:
        """Compose and store a new pool unless one was already built today.

        Returns ``True`` when the pool was replaced.
        """
        today = today or self._today()
        # Overlapping callers wait here and then see the pool the first one stored.
        async with self._refresh_lock:
            if not force and not is_due(self.catalog.refreshed_on, today):
                logger.debug("Daily pool already refreshed on %s", today)
                return False

            pool = self.composer.compose()
            await self.catalog_store.replace(pool, today)
            self.catalog.replace_all(pool, refreshed_on=today)
        logger.info("Daily pool for %s replaced with %d rewards", today, len(pool))
        await self.event_bus.publish(
            CATALOG_REFRESHED,
            {"refreshed_on": today.isoformat(), "rewards": [reward.reward_id for reward in pool]},
        )
        return True

    async def load_catalog(self) -> None:
        """Restore the last stored pool into memory."""
        snapshot = await self.catalog_store.load()
        self.catalog.replace_all(snapshot.definitions, refreshed_on=snapshot.refreshed_on)

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "draw_cost": self.config.gacha.draw_cost,
            "master": [reward.reward_id for reward in self.composer.master],
            "pool": [reward.reward_id for reward in self.catalog.all()],
            "refreshed_on": (
                self.catalog.refreshed_on.isoformat() if self.catalog.refreshed_on else None
            ),
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources and restore the stored pool."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()
        await self.load_catalog()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
