from random import Random

import pytest

from lootforge.domain.reveal import (
    IDLE_MIN_LENGTH,
    PATTERN_LENGTH,
    PREFIX_REPEATS,
    TARGET_LOOP,
    RevealSequencer,
)
from lootforge.domain.rewards import InventoryItem, RewardDefinition, Tier
from lootforge.testing import RewardFactory

STRIP_LENGTH = 110


def _pool(common=0, uncommon=0, rare=0, legendary=0, *, seed=0):
    factory = RewardFactory(rng=Random(seed))
    return [
        *factory.batch(common, Tier.COMMON),
        *factory.batch(uncommon, Tier.UNCOMMON),
        *factory.batch(rare, Tier.RARE),
        *factory.batch(legendary, Tier.LEGENDARY),
    ]


COMPOSITIONS = {
    "mixed": dict(common=5, uncommon=3, rare=2, legendary=1),
    "no-rare": dict(common=4, uncommon=4),
    "no-common": dict(uncommon=3, rare=2, legendary=1),
    "rare-only": dict(rare=3),
    "legendary-only": dict(legendary=2),
    "empty": dict(),
}


@pytest.mark.parametrize("composition", COMPOSITIONS.values(), ids=COMPOSITIONS.keys())
@pytest.mark.parametrize("winner_tier", list(Tier))
def test_strip_always_lands_on_winner(composition, winner_tier):
    pool = _pool(**composition)
    winner = InventoryItem.materialize(
        RewardDefinition(reward_id="winner", name="Winner", image="🏆", tier=winner_tier)
    )
    for seed in range(25):
        plan = RevealSequencer(rng=Random(seed)).build_reveal(winner, pool)

        assert len(plan.strip) == STRIP_LENGTH
        assert plan.strip[plan.target_index] is plan.winner
        assert plan.winner.reward_id == "winner"
        assert plan.target_index == (
            PREFIX_REPEATS * PATTERN_LENGTH
            + TARGET_LOOP * PATTERN_LENGTH
            + plan.winner_index_in_pattern
        )
        assert 0 <= plan.winner_index_in_pattern < PATTERN_LENGTH


def test_strip_repeats_the_pattern():
    pool = _pool(common=5, uncommon=3, rare=2)
    plan = RevealSequencer(rng=Random(4)).build_reveal(pool[0], pool)
    assert len(plan.pattern) == PATTERN_LENGTH
    for offset in range(0, STRIP_LENGTH, PATTERN_LENGTH):
        assert plan.strip[offset : offset + PATTERN_LENGTH] == plan.pattern


@pytest.mark.parametrize("winner_tier", list(Tier))
def test_fillers_skip_legendaries_and_cap_rares(winner_tier):
    pool = _pool(common=5, uncommon=3, rare=3, legendary=2, seed=9)
    winner = next(reward for reward in pool if reward.tier == winner_tier)
    for seed in range(50):
        plan = RevealSequencer(rng=Random(seed)).build_reveal(winner, pool)
        fillers = [view for view in plan.pattern if view is not plan.winner]

        assert len(fillers) == PATTERN_LENGTH - 1
        assert all(view.tier != Tier.LEGENDARY for view in fillers)
        assert sum(1 for view in plan.pattern if view.tier == Tier.RARE) <= 1


def test_empty_pool_fills_pattern_with_winner_copies():
    winner = RewardDefinition(reward_id="solo", name="Solo", image="⭐", tier=Tier.RARE)
    plan = RevealSequencer(rng=Random(1)).build_reveal(winner, [])
    assert {view.reward_id for view in plan.strip} == {"solo"}
    assert plan.strip[plan.target_index] is plan.winner


def test_rebalance_prefers_commons_over_uncommons():
    pool = _pool(common=2, uncommon=6, seed=5)
    winner = next(reward for reward in pool if reward.tier == Tier.COMMON)
    for seed in range(50):
        plan = RevealSequencer(rng=Random(seed)).build_reveal(winner, pool)
        uncommon = sum(1 for view in plan.pattern if view.tier == Tier.UNCOMMON)
        common = sum(1 for view in plan.pattern if view.tier == Tier.COMMON)
        assert plan.balanced
        assert uncommon < common


def test_rebalance_gives_up_without_commons():
    pool = _pool(uncommon=4, seed=6)
    plan = RevealSequencer(rng=Random(2)).build_reveal(pool[0], pool)
    assert not plan.balanced
    assert plan.strip[plan.target_index] is plan.winner


def test_build_reveal_is_deterministic_for_a_seed():
    pool = _pool(common=5, uncommon=3, rare=2, legendary=1)
    first = RevealSequencer(rng=Random(11)).build_reveal(pool[0], pool)
    second = RevealSequencer(rng=Random(11)).build_reveal(pool[0], pool)
    assert first.strip == second.strip
    assert first.target_index == second.target_index


@pytest.mark.parametrize("size", [1, 7, 11, 50, 64])
def test_idle_display_tiles_pool(size):
    pool = _pool(common=size, seed=size)
    display = RevealSequencer().build_idle_display(pool)

    assert len(display.items) >= IDLE_MIN_LENGTH
    assert len(display.items) % size == 0
    assert display.offset == len(display.items) // 2
    assert [view.reward_id for view in display.items[:size]] == [r.reward_id for r in pool]


def test_idle_display_of_empty_pool():
    display = RevealSequencer().build_idle_display([])
    assert display.items == ()
    assert display.offset == 0
