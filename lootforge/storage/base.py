"""Storage abstractions used by the LootForge services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Protocol, Sequence

from ..domain.rewards import InventoryItem, RewardDefinition

HistoryAction = Literal["draw", "craft"]


@dataclass(slots=True)
class PlayerRecord:
    user_id: int
    username: str | None = None
    balance: float = 0.0
    inventory: list[InventoryItem] = field(default_factory=list)


@dataclass(slots=True)
class CatalogSnapshot:
    definitions: Sequence[RewardDefinition] = ()
    refreshed_on: date | None = None


@dataclass(slots=True)
class GachaHistoryRecord:
    user_id: int
    action: HistoryAction
    reward_id: str
    reward_name: str
    tier: int
    timestamp: datetime
    cost: float = 0.0
    consumed_ids: Sequence[str] = ()


class PlayerStore(Protocol):
    async def get_or_create(self, user_id: int, username: str | None = None) -> PlayerRecord:
        ...

    async def save(self, record: PlayerRecord) -> None:
        """Persist balance and username; inventory goes through deltas."""
        ...

    async def persist_inventory_delta(
        self,
        user_id: int,
        *,
        balance: float,
        added: Sequence[InventoryItem],
        removed_ids: Sequence[str],
    ) -> None:
        """Write the new balance and the inventory change as one transaction."""
        ...


class CatalogStore(Protocol):
    async def load(self) -> CatalogSnapshot:
        ...

    async def replace(
        self, definitions: Sequence[RewardDefinition], refreshed_on: date | None
    ) -> None:
        ...


class HistoryStore(Protocol):
    async def add_record(self, record: GachaHistoryRecord) -> None:
        ...

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[GachaHistoryRecord]:
        ...
