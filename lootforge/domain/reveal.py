"""Reveal strips: the animated reel that lands on an already decided winner.

The strip is presentation only. The economic effect of a draw is applied
before a plan is built, so a plan can be dropped at any point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Sequence

from .rewards import InventoryItem, ItemView, RewardDefinition, Tier
from .sampling import RandomSource, pick, shuffle

logger = logging.getLogger(__name__)

PATTERN_LENGTH = 10
PREFIX_REPEATS = 3
LOOP_REPEATS = 8
TARGET_LOOP = 5
MAX_REBALANCE_ATTEMPTS = 100
IDLE_MIN_LENGTH = 50
MAX_RARE_PER_PATTERN = 1


@dataclass(slots=True, frozen=True)
class RevealPlan:
    strip: tuple[ItemView, ...]
    target_index: int
    pattern: tuple[ItemView, ...]
    winner: ItemView
    balanced: bool = True

    @property
    def winner_index_in_pattern(self) -> int:
        return self.target_index - (PREFIX_REPEATS + TARGET_LOOP) * len(self.pattern)


@dataclass(slots=True, frozen=True)
class IdleDisplay:
    items: tuple[ItemView, ...]
    offset: int


class RevealSequencer:
    """Build reveal strips and idle reels from the current reward pool."""

    def __init__(self, *, rng: RandomSource | None = None) -> None:
        self._rng = rng or Random()

    def build_idle_display(self, pool: Sequence[RewardDefinition]) -> IdleDisplay:
        if not pool:
            return IdleDisplay(items=(), offset=0)
        views = [ItemView.of(reward) for reward in pool]
        items: list[ItemView] = []
        while len(items) < IDLE_MIN_LENGTH:
            items.extend(views)
        return IdleDisplay(items=tuple(items), offset=len(items) // 2)

    def build_reveal(
        self,
        winner: InventoryItem | RewardDefinition | ItemView,
        pool: Sequence[RewardDefinition],
    ) -> RevealPlan:
        winner_view = winner if isinstance(winner, ItemView) else ItemView.of(winner)
        views = [ItemView.of(reward) for reward in pool]

        pattern = self._fill_pattern(winner_view, views)
        balanced = self._rebalance(pattern, views)

        shuffle(self._rng, pattern)
        winner_index = next(idx for idx, view in enumerate(pattern) if view is winner_view)

        prefix = pattern * PREFIX_REPEATS
        loops = pattern * LOOP_REPEATS
        strip = tuple(prefix + loops)
        target_index = len(prefix) + TARGET_LOOP * len(pattern) + winner_index

        logger.debug(
            "Reveal for %s: pattern slot %d, target index %d of %d",
            winner_view.reward_id,
            winner_index,
            target_index,
            len(strip),
        )
        return RevealPlan(
            strip=strip,
            target_index=target_index,
            pattern=tuple(pattern),
            winner=winner_view,
            balanced=balanced,
        )

    def _fill_pattern(self, winner: ItemView, views: list[ItemView]) -> list[ItemView]:
        pattern = [winner]
        commons = [view for view in views if view.tier == Tier.COMMON]
        while len(pattern) < PATTERN_LENGTH:
            rare_slots = sum(1 for view in pattern if view.tier == Tier.RARE)
            candidates = [
                view
                for view in views
                if view.tier != Tier.LEGENDARY
                and not (view.tier == Tier.RARE and rare_slots >= MAX_RARE_PER_PATTERN)
            ]
            fallback = candidates or commons or views or [winner]
            # Fresh copies keep filler slots distinguishable from the winner by identity.
            pattern.append(ItemView.of(pick(self._rng, fallback)))
        return pattern

    def _rebalance(self, pattern: list[ItemView], views: list[ItemView]) -> bool:
        """Swap uncommon fillers for commons until commons outnumber uncommons.

        Best effort: gives up when no uncommon filler or no common reward is
        left, or after ``MAX_REBALANCE_ATTEMPTS``; the pattern is then used as is.
        """
        commons = [view for view in views if view.tier == Tier.COMMON]
        for _ in range(MAX_REBALANCE_ATTEMPTS):
            uncommon = sum(1 for view in pattern if view.tier == Tier.UNCOMMON)
            common = sum(1 for view in pattern if view.tier == Tier.COMMON)
            if uncommon < common:
                return True
            swappable = [
                idx for idx in range(1, len(pattern)) if pattern[idx].tier == Tier.UNCOMMON
            ]
            if not swappable or not commons:
                break
            pattern[pick(self._rng, swappable)] = ItemView.of(pick(self._rng, commons))

        logger.debug("Reveal pattern left unbalanced: %s", [int(view.tier) for view in pattern])
        return False
