"""Domain models and services."""

from .rewards import InventoryItem, ItemView, RewardCatalog, RewardDefinition, Tier
from .results import Failure, Result, Success
from .lottery import DrawOutcome, Lottery
from .ledger import InventoryLedger
from .crafting import CraftOutcome, TradeUpCrafter, TradeUpProgress
from .reveal import IdleDisplay, RevealPlan, RevealSequencer
from .daily_pool import DailyPoolComposer
from .player import PlayerProfile, PlayerService
from .exceptions import (
    EconomyError,
    InsufficientBalance,
    InsufficientSourceItems,
    LootForgeError,
    NoPoolForTargetTier,
    NoRewardsConfigured,
    RevealInProgress,
)

__all__ = [
    "InventoryItem",
    "ItemView",
    "RewardCatalog",
    "RewardDefinition",
    "Tier",
    "Failure",
    "Result",
    "Success",
    "DrawOutcome",
    "Lottery",
    "InventoryLedger",
    "CraftOutcome",
    "TradeUpCrafter",
    "TradeUpProgress",
    "IdleDisplay",
    "RevealPlan",
    "RevealSequencer",
    "DailyPoolComposer",
    "PlayerProfile",
    "PlayerService",
    "EconomyError",
    "InsufficientBalance",
    "InsufficientSourceItems",
    "LootForgeError",
    "NoPoolForTargetTier",
    "NoRewardsConfigured",
    "RevealInProgress",
]
