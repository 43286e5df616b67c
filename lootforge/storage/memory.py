"""In-memory storage backend for LootForge."""

from __future__ import annotations

from collections import deque
from datetime import date
from typing import Deque, Sequence

from ..domain.rewards import InventoryItem, RewardDefinition
from .base import (
    CatalogSnapshot,
    CatalogStore,
    GachaHistoryRecord,
    HistoryStore,
    PlayerRecord,
    PlayerStore,
)


class InMemoryPlayerStore(PlayerStore):
    def __init__(self, *, starting_balance: float = 0.0) -> None:
        self._records: dict[int, PlayerRecord] = {}
        self._starting_balance = starting_balance

    async def get_or_create(self, user_id: int, username: str | None = None) -> PlayerRecord:
        if user_id not in self._records:
            self._records[user_id] = PlayerRecord(
                user_id=user_id, username=username, balance=self._starting_balance
            )
        record = self._records[user_id]
        if username and record.username != username:
            record.username = username
        return PlayerRecord(
            user_id=record.user_id,
            username=record.username,
            balance=record.balance,
            inventory=list(record.inventory),
        )

    async def save(self, record: PlayerRecord) -> None:
        stored = self._records.setdefault(record.user_id, PlayerRecord(user_id=record.user_id))
        stored.username = record.username
        stored.balance = record.balance

    async def persist_inventory_delta(
        self,
        user_id: int,
        *,
        balance: float,
        added: Sequence[InventoryItem],
        removed_ids: Sequence[str],
    ) -> None:
        stored = self._records.setdefault(user_id, PlayerRecord(user_id=user_id))
        removed = set(removed_ids)
        stored.inventory = [
            item for item in stored.inventory if item.item_id not in removed
        ] + list(added)
        stored.balance = balance


class InMemoryCatalogStore(CatalogStore):
    def __init__(self) -> None:
        self._snapshot = CatalogSnapshot()

    async def load(self) -> CatalogSnapshot:
        return self._snapshot

    async def replace(
        self, definitions: Sequence[RewardDefinition], refreshed_on: date | None
    ) -> None:
        self._snapshot = CatalogSnapshot(definitions=tuple(definitions), refreshed_on=refreshed_on)


class InMemoryHistoryStore(HistoryStore):
    def __init__(self, *, maxlen: int = 5000) -> None:
        self._history: Deque[GachaHistoryRecord] = deque(maxlen=maxlen)

    async def add_record(self, record: GachaHistoryRecord) -> None:
        self._history.append(record)

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[GachaHistoryRecord]:
        filtered = [rec for rec in reversed(self._history) if rec.user_id == user_id]
        return filtered[:limit]
