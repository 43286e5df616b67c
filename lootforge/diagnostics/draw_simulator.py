"""Draw simulation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Dict

from ..app import LootApp
from ..domain.lottery import BASE_TIER_PROBABILITIES, Lottery
from ..domain.rewards import RewardCatalog, Tier


@dataclass(slots=True)
class SimulationResult:
    draws: int
    tiers: Dict[Tier, int] = field(default_factory=lambda: {tier: 0 for tier in Tier})
    rewards: Dict[str, int] = field(default_factory=dict)
    failures: int = 0

    def share(self, tier: Tier) -> float:
        succeeded = self.draws - self.failures
        return self.tiers[tier] / succeeded if succeeded else 0.0

    def deviation(self, tier: Tier) -> float:
        return self.share(tier) - BASE_TIER_PROBABILITIES[tier]


class DrawSimulator:
    """Monte-Carlo run of the lottery against a pool, without touching balances."""

    def __init__(self, app: LootApp, *, rng: Random | None = None) -> None:
        self._app = app
        self._lottery = Lottery(rng=rng or Random())

    def simulate(self, *, draws: int = 10_000, catalog: RewardCatalog | None = None) -> SimulationResult:
        catalog = catalog or self._app.catalog
        result = SimulationResult(draws=draws)
        for _ in range(draws):
            outcome = self._lottery.draw(0.0, 0.0, catalog)
            if not outcome.ok:
                result.failures += 1
                continue
            item = outcome.value.item
            result.tiers[item.tier] += 1
            result.rewards[item.reward_id] = result.rewards.get(item.reward_id, 0) + 1
        return result
