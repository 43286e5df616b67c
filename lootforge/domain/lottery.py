"""Weighted-tier reward draws."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from random import Random
from typing import TYPE_CHECKING, Sequence

from .exceptions import InsufficientBalance, NoRewardsConfigured
from .results import Failure, Result, Success
from .rewards import InventoryItem, RewardCatalog, RewardDefinition, Tier
from .sampling import RandomSource, pick

if TYPE_CHECKING:
    from .reveal import RevealPlan

logger = logging.getLogger(__name__)

# Upper roll bounds on a 0-100 scale; everything above the last bound is common.
TIER_THRESHOLDS: tuple[tuple[float, Tier], ...] = (
    (13.0, Tier.RARE),
    (50.0, Tier.UNCOMMON),
)
BASE_TIER_PROBABILITIES: dict[Tier, float] = {
    Tier.LEGENDARY: 0.0,
    Tier.RARE: 0.13,
    Tier.UNCOMMON: 0.37,
    Tier.COMMON: 0.50,
}


@dataclass(slots=True, frozen=True)
class DrawOutcome:
    item: InventoryItem
    tier: Tier
    rolled_tier: Tier
    debited_cost: float
    balance: float
    reveal: "RevealPlan | None" = None


def tier_for_roll(roll: float) -> Tier:
    for upper_bound, tier in TIER_THRESHOLDS:
        if roll < upper_bound:
            return tier
    return Tier.COMMON


class Lottery:
    """Roll a tier, then pick a concrete reward from today's pool."""

    def __init__(self, *, rng: RandomSource | None = None) -> None:
        self._rng = rng or Random()

    def draw(
        self,
        balance: float,
        cost: float,
        catalog: RewardCatalog,
        *,
        now: datetime | None = None,
    ) -> Result[DrawOutcome, InsufficientBalance | NoRewardsConfigured]:
        if cost < 0:
            raise ValueError("Draw cost cannot be negative")
        if balance < cost:
            return Failure(InsufficientBalance(balance, cost))

        rolled = self.roll_tier()
        candidates = self._candidates(rolled, catalog)
        if not candidates:
            return Failure(NoRewardsConfigured())

        definition = pick(self._rng, candidates)
        item = InventoryItem.materialize(definition, acquired_at=now)
        if definition.tier != rolled:
            logger.debug(
                "Tier %s pool empty; fell back to %s for reward %s",
                rolled.label,
                definition.tier.label,
                definition.reward_id,
            )
        return Success(
            DrawOutcome(
                item=item,
                tier=item.tier,
                rolled_tier=rolled,
                debited_cost=cost,
                balance=balance - cost,
            )
        )

    def roll_tier(self) -> Tier:
        return tier_for_roll(self._rng.random() * 100)

    def _candidates(self, tier: Tier, catalog: RewardCatalog) -> Sequence[RewardDefinition]:
        same_tier = catalog.by_tier(tier)
        if same_tier:
            return same_tier
        # Prefer same-or-more-common tiers before widening to anything drawable.
        drawable = [reward for reward in catalog.all() if reward.tier != Tier.LEGENDARY]
        more_common = [reward for reward in drawable if reward.tier >= tier]
        return more_common or drawable
