"""Owned-item ledger."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Iterator

from .rewards import InventoryItem, Tier


class InventoryLedger:
    """Items keyed by id, kept in insertion order.

    Insertion order is the ledger's natural order: ``select_first_n`` always
    returns the oldest matching units, so trade-up consumption is deterministic.
    """

    def __init__(self, items: Iterable[InventoryItem] = ()) -> None:
        self._items: dict[str, InventoryItem] = {}
        for item in items:
            self.add(item)

    def add(self, item: InventoryItem) -> None:
        if item.item_id in self._items:
            raise ValueError(f"Item {item.item_id} already in inventory")
        self._items[item.item_id] = item

    def remove_by_ids(self, item_ids: Iterable[str]) -> list[InventoryItem]:
        return self.apply(added=(), removed_ids=item_ids)

    def apply(
        self, *, added: Iterable[InventoryItem], removed_ids: Iterable[str]
    ) -> list[InventoryItem]:
        """Remove and insert as one step; nothing changes if any id is invalid."""
        removed_ids = list(dict.fromkeys(removed_ids))
        added = list(added)
        missing = [item_id for item_id in removed_ids if item_id not in self._items]
        if missing:
            raise KeyError(f"Items not in inventory: {', '.join(missing)}")
        duplicates = [
            item.item_id
            for item in added
            if item.item_id in self._items and item.item_id not in removed_ids
        ]
        if duplicates:
            raise ValueError(f"Items already in inventory: {', '.join(duplicates)}")

        removed = [self._items.pop(item_id) for item_id in removed_ids]
        for item in added:
            self._items[item.item_id] = item
        return removed

    def count_by_tier(self, tier: int | Tier) -> int:
        return sum(1 for item in self._items.values() if item.tier == tier)

    def counts(self) -> dict[Tier, int]:
        counter = Counter(item.tier for item in self._items.values())
        return {tier: counter.get(tier, 0) for tier in Tier}

    def select_first_n(self, tier: int | Tier, n: int) -> list[InventoryItem]:
        if n < 0:
            raise ValueError("Selection size cannot be negative")
        selected: list[InventoryItem] = []
        for item in self._items.values():
            if len(selected) >= n:
                break
            if item.tier == tier:
                selected.append(item)
        return selected

    def items(self) -> list[InventoryItem]:
        return list(self._items.values())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[InventoryItem]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)
