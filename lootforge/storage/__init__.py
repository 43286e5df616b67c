"""Storage backends for LootForge."""

from .base import (
    CatalogSnapshot,
    CatalogStore,
    GachaHistoryRecord,
    HistoryStore,
    PlayerRecord,
    PlayerStore,
)
from .memory import InMemoryCatalogStore, InMemoryHistoryStore, InMemoryPlayerStore
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "CatalogSnapshot",
    "CatalogStore",
    "GachaHistoryRecord",
    "HistoryStore",
    "PlayerRecord",
    "PlayerStore",
    "InMemoryCatalogStore",
    "InMemoryHistoryStore",
    "InMemoryPlayerStore",
    "AsyncSQLAlchemyStorage",
]
