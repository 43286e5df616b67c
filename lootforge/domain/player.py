"""Player-centric utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from .economy import PointsWallet
from .exceptions import InsufficientBalance
from .rewards import InventoryItem, Tier
from ..storage.base import PlayerRecord, PlayerStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlayerProfile:
    user_id: int
    username: str | None
    balance: float
    tier_counts: Mapping[Tier, int]
    item_count: int


class PlayerService:
    """Expose read/write operations for balances and lockers."""

    def __init__(self, store: PlayerStore) -> None:
        self._store = store

    async def fetch(self, user_id: int, *, username: str | None = None) -> PlayerProfile:
        record = await self._store.get_or_create(user_id, username)
        return self._to_profile(record)

    async def credit(self, user_id: int, amount: float) -> PlayerProfile:
        if amount <= 0:
            raise ValueError("Amount must be positive")
        record = await self._store.get_or_create(user_id)
        wallet = PointsWallet(balance=record.balance)
        wallet.credit(amount)
        record.balance = wallet.balance
        await self._store.save(record)
        logger.info("Credited %g points to user %s", amount, user_id)
        return self._to_profile(record)

    async def debit(self, user_id: int, amount: float) -> PlayerProfile:
        if amount <= 0:
            raise ValueError("Amount must be positive")
        record = await self._store.get_or_create(user_id)
        wallet = PointsWallet(balance=record.balance)
        if not wallet.can_afford(amount):
            raise InsufficientBalance(record.balance, amount)
        wallet.debit(amount)
        record.balance = wallet.balance
        await self._store.save(record)
        logger.info("Debited %g points from user %s", amount, user_id)
        return self._to_profile(record)

    async def locker(self, user_id: int) -> Sequence[InventoryItem]:
        """Owned items, newest first."""
        record = await self._store.get_or_create(user_id)
        return sorted(record.inventory, key=lambda item: item.acquired_at, reverse=True)

    def _to_profile(self, record: PlayerRecord) -> PlayerProfile:
        counts = {tier: 0 for tier in Tier}
        for item in record.inventory:
            counts[item.tier] += 1
        return PlayerProfile(
            user_id=record.user_id,
            username=record.username,
            balance=record.balance,
            tier_counts=counts,
            item_count=len(record.inventory),
        )
