import pytest

from lootforge.domain.ledger import InventoryLedger
from lootforge.domain.rewards import Tier
from lootforge.testing import InventoryFactory


def test_add_rejects_duplicate_item_id():
    item = InventoryFactory().build()
    ledger = InventoryLedger([item])
    with pytest.raises(ValueError):
        ledger.add(item)


def test_select_first_n_returns_oldest_matching_items():
    factory = InventoryFactory()
    items = [
        factory.build(Tier.COMMON),
        factory.build(Tier.UNCOMMON),
        factory.build(Tier.COMMON),
        factory.build(Tier.COMMON),
    ]
    ledger = InventoryLedger(items)

    selected = ledger.select_first_n(Tier.COMMON, 2)

    assert [item.item_id for item in selected] == [items[0].item_id, items[2].item_id]
    assert ledger.select_first_n(Tier.RARE, 3) == []


def test_apply_is_all_or_nothing():
    factory = InventoryFactory()
    items = factory.batch(3)
    ledger = InventoryLedger(items)
    produced = factory.build(Tier.UNCOMMON)

    with pytest.raises(KeyError):
        ledger.apply(added=[produced], removed_ids=[items[0].item_id, "missing"])

    assert ledger.items() == items
    assert produced.item_id not in ledger


def test_apply_removes_and_appends():
    factory = InventoryFactory()
    items = factory.batch(3)
    ledger = InventoryLedger(items)
    produced = factory.build(Tier.UNCOMMON)

    removed = ledger.apply(added=[produced], removed_ids=[items[0].item_id, items[1].item_id])

    assert removed == items[:2]
    assert ledger.items() == [items[2], produced]


def test_counts_cover_every_tier():
    factory = InventoryFactory()
    ledger = InventoryLedger([*factory.batch(2, Tier.COMMON), factory.build(Tier.RARE)])
    assert ledger.counts() == {
        Tier.LEGENDARY: 0,
        Tier.RARE: 1,
        Tier.UNCOMMON: 0,
        Tier.COMMON: 2,
    }
    assert ledger.count_by_tier(Tier.COMMON) == 2
    assert len(ledger) == 3
