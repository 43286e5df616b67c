"""LootForge framework public API."""

from .app import LootApp
from .config import LootForgeConfig
from .engine import DrawState, LootEngine

__all__ = [
    "DrawState",
    "LootApp",
    "LootEngine",
    "LootForgeConfig",
]
