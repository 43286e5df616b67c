"""Testing utilities for LootForge."""

from .factory import InventoryFactory, RewardFactory
from .fixtures import app_fixture, memory_app
from .randomness import ScriptedRandom
from .scheduling import ManualScheduler

__all__ = [
    "InventoryFactory",
    "RewardFactory",
    "app_fixture",
    "memory_app",
    "ScriptedRandom",
    "ManualScheduler",
]
