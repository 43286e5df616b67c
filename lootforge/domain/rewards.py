"""Reward domain models and the daily reward catalog."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import IntEnum
from typing import Any, Iterable, Mapping, Sequence


class Tier(IntEnum):
    LEGENDARY = 1
    RARE = 2
    UNCOMMON = 3
    COMMON = 4

    @property
    def label(self) -> str:
        return self.name.title()


def coerce_tier(value: int | Tier) -> Tier:
    try:
        return Tier(int(value))
    except ValueError as exc:
        raise ValueError(f"Tier must be between 1 and 4, got {value!r}") from exc


@dataclass(slots=True, frozen=True)
class RewardDefinition:
    """A reward that can show up in the daily pool."""

    reward_id: str
    name: str
    image: str
    tier: Tier = Tier.COMMON
    description: str | None = None
    aura_colors: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.reward_id,
            "name": self.name,
            "image": self.image,
            "tier": int(self.tier),
        }
        if self.description:
            data["description"] = self.description
        if self.aura_colors:
            data["auraColors"] = list(self.aura_colors)
        return data

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> "RewardDefinition":
        aura = entry.get("auraColors")
        return cls(
            reward_id=str(entry["id"]),
            name=entry["name"],
            image=entry["image"],
            tier=coerce_tier(entry.get("tier", Tier.COMMON)),
            description=entry.get("description") or None,
            aura_colors=tuple(map(str, aura)) if aura else None,
        )


@dataclass(slots=True, frozen=True)
class InventoryItem:
    """An owned copy of a reward. Display fields are denormalized."""

    item_id: str
    reward_id: str
    name: str
    image: str
    tier: Tier
    acquired_at: datetime
    aura_colors: tuple[str, ...] | None = None

    @classmethod
    def materialize(
        cls,
        definition: RewardDefinition,
        *,
        acquired_at: datetime | None = None,
        item_id: str | None = None,
    ) -> "InventoryItem":
        return cls(
            item_id=item_id or uuid.uuid4().hex,
            reward_id=definition.reward_id,
            name=definition.name,
            image=definition.image,
            tier=definition.tier,
            acquired_at=acquired_at or datetime.now(timezone.utc),
            aura_colors=definition.aura_colors,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.item_id,
            "rewardId": self.reward_id,
            "name": self.name,
            "image": self.image,
            "tier": int(self.tier),
            "acquiredAt": self.acquired_at.isoformat(),
        }
        if self.aura_colors:
            data["auraColors"] = list(self.aura_colors)
        return data

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> "InventoryItem":
        acquired_at = datetime.fromisoformat(entry["acquiredAt"])
        if acquired_at.tzinfo is None:
            acquired_at = acquired_at.replace(tzinfo=timezone.utc)
        aura = entry.get("auraColors")
        return cls(
            item_id=str(entry["id"]),
            reward_id=str(entry["rewardId"]),
            name=entry["name"],
            image=entry["image"],
            tier=coerce_tier(entry["tier"]),
            acquired_at=acquired_at,
            aura_colors=tuple(map(str, aura)) if aura else None,
        )


@dataclass(slots=True, frozen=True)
class ItemView:
    """Display record handed to renderers."""

    reward_id: str
    name: str
    image: str
    tier: Tier
    aura_colors: tuple[str, ...] | None = None

    @classmethod
    def of(cls, source: "RewardDefinition | InventoryItem | ItemView") -> "ItemView":
        return cls(
            reward_id=source.reward_id,
            name=source.name,
            image=source.image,
            tier=source.tier,
            aura_colors=source.aura_colors,
        )


class RewardCatalog:
    """Today's reward pool. Replaced wholesale, never edited in place."""

    def __init__(
        self,
        pool: Iterable[RewardDefinition] = (),
        *,
        refreshed_on: date | None = None,
    ) -> None:
        self._pool: tuple[RewardDefinition, ...] = tuple(pool)
        self.refreshed_on = refreshed_on

    def by_tier(self, tier: int | Tier) -> list[RewardDefinition]:
        return [reward for reward in self._pool if reward.tier == tier]

    def all(self) -> list[RewardDefinition]:
        return list(self._pool)

    def get(self, reward_id: str) -> RewardDefinition:
        for reward in self._pool:
            if reward.reward_id == reward_id:
                return reward
        raise KeyError(f"Reward {reward_id} not found")

    def replace_all(
        self, pool: Sequence[RewardDefinition], *, refreshed_on: date | None = None
    ) -> None:
        # Single assignment so readers see either the old or the new pool.
        self._pool = tuple(pool)
        self.refreshed_on = refreshed_on

    def __len__(self) -> int:
        return len(self._pool)
