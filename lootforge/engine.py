"""Per-actor boundary for draws, trade-ups, and reveal timing.

A ``LootEngine`` owns one user's request state machine::

    idle -> drawing -> revealing -> idle

The economic effect of a draw is committed while ``drawing``. ``revealing``
only tracks the presentation timer, so skipping or cancelling a reveal never
needs a compensating change.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from .config import LootForgeConfig
from .domain.crafting import CraftOutcome, TradeUpCrafter, TradeUpProgress
from .domain.economy import PointsWallet
from .domain.events import (
    DRAW_COMPLETED,
    REVEAL_CANCELLED,
    REVEAL_COMPLETED,
    TRADE_UP_COMPLETED,
    EventBus,
)
from .domain.exceptions import EconomyError, RevealInProgress
from .domain.ledger import InventoryLedger
from .domain.lottery import DrawOutcome, Lottery
from .domain.results import Failure, Result, Success
from .domain.reveal import IdleDisplay, RevealPlan, RevealSequencer
from .domain.rewards import InventoryItem, ItemView, RewardCatalog, RewardDefinition, Tier
from .scheduling import Scheduler, TimerHandle
from .storage.base import GachaHistoryRecord, HistoryStore, PlayerStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class DrawState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    REVEALING = "revealing"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LootEngine:
    """Serialize one actor's draws and crafts and time their reveals."""

    def __init__(
        self,
        user_id: int,
        *,
        config: LootForgeConfig,
        catalog: RewardCatalog,
        player_store: PlayerStore,
        history_store: HistoryStore,
        lottery: Lottery,
        crafter: TradeUpCrafter,
        sequencer: RevealSequencer,
        scheduler: Scheduler,
        event_bus: EventBus,
        clock: Clock = utc_now,
        username: str | None = None,
    ) -> None:
        self.user_id = user_id
        self.username = username
        self._config = config
        self._catalog = catalog
        self._players = player_store
        self._history = history_store
        self._lottery = lottery
        self._crafter = crafter
        self._sequencer = sequencer
        self._scheduler = scheduler
        self._events = event_bus
        self._clock = clock
        self._state = DrawState.IDLE
        self._timer: TimerHandle | None = None
        self._current_reveal: RevealPlan | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def current_reveal(self) -> RevealPlan | None:
        return self._current_reveal

    async def draw(self, cost: float | None = None) -> Result[DrawOutcome, EconomyError]:
        if self._state is not DrawState.IDLE:
            return Failure(RevealInProgress(self._state.value))
        cost = self._config.gacha.draw_cost if cost is None else cost

        self._state = DrawState.DRAWING
        committed = False
        try:
            record = await self._players.get_or_create(self.user_id, self.username)
            result = self._lottery.draw(record.balance, cost, self._catalog, now=self._clock())
            if not result.ok:
                logger.info("Draw refused for user %s: %s", self.user_id, result.error)
                return result

            outcome = result.value
            wallet = PointsWallet(balance=record.balance)
            wallet.debit(outcome.debited_cost)
            await self._players.persist_inventory_delta(
                self.user_id, balance=wallet.balance, added=[outcome.item], removed_ids=()
            )
            committed = True
        finally:
            if not committed:
                self._state = DrawState.IDLE

        logger.info(
            "User %s drew %s (%s) for %g points",
            self.user_id,
            outcome.item.name,
            outcome.tier.label,
            outcome.debited_cost,
        )
        plan = self.build_reveal(outcome.item)
        self._start_reveal(plan)

        await self._history.add_record(
            GachaHistoryRecord(
                user_id=self.user_id,
                action="draw",
                reward_id=outcome.item.reward_id,
                reward_name=outcome.item.name,
                tier=int(outcome.tier),
                cost=outcome.debited_cost,
                timestamp=outcome.item.acquired_at,
            )
        )
        await self._events.publish(
            DRAW_COMPLETED,
            {
                "user_id": self.user_id,
                "item": outcome.item.to_dict(),
                "cost": outcome.debited_cost,
                "balance": wallet.balance,
            },
        )
        return Success(replace(outcome, balance=wallet.balance, reveal=plan))

    async def craft(self, target_tier: int | Tier) -> Result[CraftOutcome, EconomyError]:
        if self._state is not DrawState.IDLE:
            return Failure(RevealInProgress(self._state.value))

        self._state = DrawState.DRAWING
        try:
            record = await self._players.get_or_create(self.user_id, self.username)
            ledger = InventoryLedger(record.inventory)
            result = self._crafter.craft(target_tier, ledger, self._catalog, now=self._clock())
            if result.ok:
                outcome = result.value
                await self._players.persist_inventory_delta(
                    self.user_id,
                    balance=record.balance,
                    added=[outcome.produced],
                    removed_ids=outcome.consumed,
                )
        finally:
            self._state = DrawState.IDLE

        if not result.ok:
            logger.info("Trade-up refused for user %s: %s", self.user_id, result.error)
            return result

        await self._history.add_record(
            GachaHistoryRecord(
                user_id=self.user_id,
                action="craft",
                reward_id=outcome.produced.reward_id,
                reward_name=outcome.produced.name,
                tier=int(outcome.produced.tier),
                consumed_ids=outcome.consumed,
                timestamp=outcome.produced.acquired_at,
            )
        )
        await self._events.publish(
            TRADE_UP_COMPLETED,
            {
                "user_id": self.user_id,
                "consumed": list(outcome.consumed),
                "item": outcome.produced.to_dict(),
            },
        )
        return result

    async def trade_up_progress(self) -> list[TradeUpProgress]:
        record = await self._players.get_or_create(self.user_id, self.username)
        return self._crafter.progress(InventoryLedger(record.inventory))

    def build_reveal(self, winner: InventoryItem | RewardDefinition | ItemView) -> RevealPlan:
        return self._sequencer.build_reveal(winner, self._catalog.all())

    def build_idle_display(self) -> IdleDisplay:
        return self._sequencer.build_idle_display(self._catalog.all())

    def skip_reveal(self) -> bool:
        """Stop the running reveal. The drawn item stays in the inventory."""
        if self._state is not DrawState.REVEALING:
            return False
        if self._timer is not None:
            self._timer.cancel()
        self._finish_reveal(REVEAL_CANCELLED)
        return True

    def _start_reveal(self, plan: RevealPlan) -> None:
        self._current_reveal = plan
        self._state = DrawState.REVEALING
        self._timer = self._scheduler.call_later(
            self._config.reveal.duration_seconds,
            lambda: self._finish_reveal(REVEAL_COMPLETED),
        )

    def _finish_reveal(self, event_name: str) -> None:
        if self._state is not DrawState.REVEALING:
            return
        plan = self._current_reveal
        self._timer = None
        self._current_reveal = None
        self._state = DrawState.IDLE
        logger.debug("Reveal for user %s ended: %s", self.user_id, event_name)
        if plan is not None and self._events.listeners(event_name):
            self._spawn_event(
                event_name, {"user_id": self.user_id, "reward_id": plan.winner.reward_id}
            )

    def _spawn_event(self, event_name: str, payload: dict) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; dropping %s notification", event_name)
            return
        task = loop.create_task(self._events.publish(event_name, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
