import pytest

from lootforge.domain.crafting import TRADE_UP_REQUIREMENTS, TradeUpCrafter, source_tier_for
from lootforge.domain.exceptions import InsufficientSourceItems, NoPoolForTargetTier
from lootforge.domain.ledger import InventoryLedger
from lootforge.domain.rewards import RewardCatalog, RewardDefinition, Tier
from lootforge.testing import InventoryFactory, ScriptedRandom


def _no_system_rewards(tier):
    return ()


def test_requirements_are_fixed():
    assert TRADE_UP_REQUIREMENTS == {Tier.UNCOMMON: 6, Tier.RARE: 10, Tier.LEGENDARY: 12}


def test_six_commons_become_one_uncommon():
    items = InventoryFactory().batch(6, Tier.COMMON)
    ledger = InventoryLedger(items)
    crafter = TradeUpCrafter(rng=ScriptedRandom([0.0]))

    outcome = crafter.craft(Tier.UNCOMMON, ledger, RewardCatalog()).unwrap()

    assert outcome.consumed == tuple(item.item_id for item in items)
    assert outcome.source_tier is Tier.COMMON
    assert outcome.produced.tier is Tier.UNCOMMON
    assert ledger.items() == [outcome.produced]


@pytest.mark.parametrize("target", [Tier.UNCOMMON, Tier.RARE, Tier.LEGENDARY])
def test_craft_consumes_exactly_the_required_count(target):
    source = source_tier_for(target)
    required = TRADE_UP_REQUIREMENTS[target]
    factory = InventoryFactory()
    ledger = InventoryLedger(factory.batch(required + 2, source))

    outcome = TradeUpCrafter(rng=ScriptedRandom([0.5])).craft(target, ledger, RewardCatalog())

    assert outcome.ok
    assert len(outcome.value.consumed) == required
    assert ledger.count_by_tier(source) == 2
    assert ledger.count_by_tier(target) == 1


@pytest.mark.parametrize("target", [Tier.UNCOMMON, Tier.RARE, Tier.LEGENDARY])
def test_craft_with_one_item_short_changes_nothing(target):
    source = source_tier_for(target)
    required = TRADE_UP_REQUIREMENTS[target]
    items = InventoryFactory().batch(required - 1, source)
    ledger = InventoryLedger(items)
    rng = ScriptedRandom([])

    result = TradeUpCrafter(rng=rng).craft(target, ledger, RewardCatalog())

    assert isinstance(result.error, InsufficientSourceItems)
    assert result.error.required == required
    assert result.error.available == required - 1
    assert ledger.items() == items
    assert rng.calls == 0


def test_craft_consumes_oldest_items_first():
    factory = InventoryFactory()
    items = factory.batch(8, Tier.COMMON)
    ledger = InventoryLedger(items)

    outcome = TradeUpCrafter(rng=ScriptedRandom([0.0])).craft(3, ledger, RewardCatalog()).unwrap()

    assert outcome.consumed == tuple(item.item_id for item in items[:6])
    assert ledger.items()[:2] == items[6:]


def test_craft_without_any_pool_fails_without_consuming():
    items = InventoryFactory().batch(6, Tier.COMMON)
    ledger = InventoryLedger(items)
    crafter = TradeUpCrafter(system_pools=_no_system_rewards)

    result = crafter.craft(Tier.UNCOMMON, ledger, RewardCatalog())

    assert isinstance(result.error, NoPoolForTargetTier)
    assert result.error.tier == 3
    assert ledger.items() == items


def test_craft_uses_catalog_rewards_of_target_tier():
    custom = RewardDefinition(reward_id="crystal", name="Crystal", image="🔮", tier=Tier.UNCOMMON)
    catalog = RewardCatalog([custom, RewardDefinition("clover", "Clover", "🍀")])
    ledger = InventoryLedger(InventoryFactory().batch(6, Tier.COMMON))
    crafter = TradeUpCrafter(rng=ScriptedRandom([0.0]), system_pools=_no_system_rewards)

    outcome = crafter.craft(Tier.UNCOMMON, ledger, catalog).unwrap()

    assert outcome.produced.reward_id == "crystal"


def test_production_pool_merges_system_and_catalog_rewards():
    custom = RewardDefinition(reward_id="crystal", name="Crystal", image="🔮", tier=Tier.RARE)
    pool = TradeUpCrafter().production_pool(Tier.RARE, RewardCatalog([custom]))
    assert pool[-1] is custom
    assert any(reward.reward_id.startswith("system:") for reward in pool)


@pytest.mark.parametrize("target", [Tier.COMMON, 0, 5])
def test_craft_rejects_invalid_targets(target):
    with pytest.raises(ValueError):
        TradeUpCrafter().craft(target, InventoryLedger(), RewardCatalog())


def test_progress_reports_each_transition():
    factory = InventoryFactory()
    ledger = InventoryLedger([*factory.batch(7, Tier.COMMON), *factory.batch(3, Tier.UNCOMMON)])

    progress = TradeUpCrafter().progress(ledger)

    assert [entry.target_tier for entry in progress] == [Tier.UNCOMMON, Tier.RARE, Tier.LEGENDARY]
    assert progress[0].ready and progress[0].available == 7
    assert not progress[1].ready and progress[1].available == 3
    assert progress[2].available == 0
