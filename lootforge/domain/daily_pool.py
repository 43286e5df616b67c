"""Daily reward pool composition."""

from __future__ import annotations

import logging
from datetime import date
from random import Random
from typing import Callable, Iterable, Mapping, Sequence

from .rewards import RewardDefinition, Tier
from .sampling import RandomSource, sample
from .system_pool import system_pool

logger = logging.getLogger(__name__)

DEFAULT_DAILY_QUOTAS: Mapping[Tier, int] = {
    Tier.COMMON: 5,
    Tier.UNCOMMON: 3,
    Tier.RARE: 2,
    Tier.LEGENDARY: 1,
}


def is_due(last_refreshed_on: date | None, today: date) -> bool:
    return last_refreshed_on is None or last_refreshed_on != today


class DailyPoolComposer:
    """Pick today's pool from the master reward list.

    Each tier contributes up to its quota, sampled without replacement. A tier
    the master list does not cover falls back to the built-in system rewards.
    """

    def __init__(
        self,
        master: Iterable[RewardDefinition] = (),
        *,
        quotas: Mapping[Tier, int] | None = None,
        rng: RandomSource | None = None,
        fallback: Callable[[Tier], Sequence[RewardDefinition]] = system_pool,
    ) -> None:
        self._master: list[RewardDefinition] = list(master)
        self._quotas = dict(DEFAULT_DAILY_QUOTAS if quotas is None else quotas)
        self._rng = rng or Random()
        self._fallback = fallback

    @property
    def master(self) -> list[RewardDefinition]:
        return list(self._master)

    def register(self, definition: RewardDefinition) -> None:
        if any(reward.reward_id == definition.reward_id for reward in self._master):
            raise ValueError(f"Reward {definition.reward_id} already registered")
        self._master.append(definition)

    def register_many(self, definitions: Iterable[RewardDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    def compose(self) -> list[RewardDefinition]:
        pool: list[RewardDefinition] = []
        for tier in sorted(Tier, reverse=True):
            quota = self._quotas.get(tier, 0)
            if quota <= 0:
                continue
            candidates = [reward for reward in self._master if reward.tier == tier]
            if not candidates:
                candidates = list(self._fallback(tier))
            pool.extend(sample(self._rng, candidates, quota))
        logger.info(
            "Composed daily pool of %d rewards from %d master entries",
            len(pool),
            len(self._master),
        )
        return pool
