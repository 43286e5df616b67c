"""Trade-up crafting: N items of one tier become one item of the next rarer tier."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from random import Random
from typing import Callable, Mapping, Sequence

from .exceptions import InsufficientSourceItems, NoPoolForTargetTier
from .ledger import InventoryLedger
from .results import Failure, Result, Success
from .rewards import InventoryItem, RewardCatalog, RewardDefinition, Tier, coerce_tier
from .sampling import RandomSource, pick
from .system_pool import system_pool

logger = logging.getLogger(__name__)

TRADE_UP_REQUIREMENTS: Mapping[Tier, int] = {
    Tier.UNCOMMON: 6,
    Tier.RARE: 10,
    Tier.LEGENDARY: 12,
}

SystemPoolProvider = Callable[[Tier], Sequence[RewardDefinition]]


@dataclass(slots=True, frozen=True)
class CraftOutcome:
    consumed: tuple[str, ...]
    produced: InventoryItem
    source_tier: Tier


@dataclass(slots=True, frozen=True)
class TradeUpProgress:
    target_tier: Tier
    source_tier: Tier
    available: int
    required: int

    @property
    def ready(self) -> bool:
        return self.available >= self.required


def source_tier_for(target_tier: int | Tier) -> Tier:
    target = coerce_tier(target_tier)
    if target not in TRADE_UP_REQUIREMENTS:
        raise ValueError(f"Tier {int(target)} cannot be crafted")
    return Tier(int(target) + 1)


class TradeUpCrafter:
    """Consume a fixed number of source items to produce one rarer item."""

    def __init__(
        self,
        *,
        rng: RandomSource | None = None,
        system_pools: SystemPoolProvider = system_pool,
    ) -> None:
        self._rng = rng or Random()
        self._system_pools = system_pools

    def craft(
        self,
        target_tier: int | Tier,
        ledger: InventoryLedger,
        catalog: RewardCatalog,
        *,
        now: datetime | None = None,
    ) -> Result[CraftOutcome, InsufficientSourceItems | NoPoolForTargetTier]:
        source = source_tier_for(target_tier)
        target = Tier(int(target_tier))
        required = TRADE_UP_REQUIREMENTS[target]

        available = ledger.count_by_tier(source)
        if available < required:
            return Failure(InsufficientSourceItems(int(source), required, available))

        pool = self.production_pool(target, catalog)
        if not pool:
            return Failure(NoPoolForTargetTier(int(target)))

        consumed = ledger.select_first_n(source, required)
        produced = InventoryItem.materialize(pick(self._rng, pool), acquired_at=now)
        ledger.apply(added=[produced], removed_ids=[item.item_id for item in consumed])

        logger.info(
            "Traded %d tier %d items for %s (%s)",
            required,
            source,
            produced.name,
            target.label,
        )
        return Success(
            CraftOutcome(
                consumed=tuple(item.item_id for item in consumed),
                produced=produced,
                source_tier=source,
            )
        )

    def production_pool(self, target: Tier, catalog: RewardCatalog) -> list[RewardDefinition]:
        # Every member weighs the same regardless of which sub-pool it came from.
        return [*self._system_pools(target), *catalog.by_tier(target)]

    def progress(self, ledger: InventoryLedger) -> list[TradeUpProgress]:
        counts = ledger.counts()
        return [
            TradeUpProgress(
                target_tier=target,
                source_tier=source_tier_for(target),
                available=counts[source_tier_for(target)],
                required=required,
            )
            for target, required in sorted(
                TRADE_UP_REQUIREMENTS.items(), key=lambda entry: entry[0], reverse=True
            )
        ]
