"""Built-in rewards that are always available to trade-ups."""

from __future__ import annotations

from typing import Mapping

from .rewards import RewardDefinition, Tier

LEGENDARY_AURAS: Mapping[str, tuple[str, ...]] = {
    "sunfire": ("#f59e0b", "#ef4444", "#fde047"),
    "aurora": ("#22d3ee", "#a855f7", "#34d399"),
    "nebula": ("#6366f1", "#ec4899", "#0ea5e9"),
}


def _system(tier: Tier, slug: str, name: str, image: str, **extra) -> RewardDefinition:
    return RewardDefinition(
        reward_id=f"system:{int(tier)}:{slug}",
        name=name,
        image=image,
        tier=tier,
        **extra,
    )


SYSTEM_POOLS: Mapping[Tier, tuple[RewardDefinition, ...]] = {
    Tier.LEGENDARY: (
        _system(Tier.LEGENDARY, "crown", "Sunfire Crown", "👑", aura_colors=LEGENDARY_AURAS["sunfire"]),
        _system(Tier.LEGENDARY, "dragon", "Aurora Dragon", "🐉", aura_colors=LEGENDARY_AURAS["aurora"]),
        _system(Tier.LEGENDARY, "comet", "Nebula Comet", "☄️", aura_colors=LEGENDARY_AURAS["nebula"]),
    ),
    Tier.RARE: (
        _system(Tier.RARE, "gem", "Violet Gem", "💎"),
        _system(Tier.RARE, "trophy", "Golden Trophy", "🏆"),
        _system(Tier.RARE, "crystal", "Crystal Ball", "🔮"),
    ),
    Tier.UNCOMMON: (
        _system(Tier.UNCOMMON, "clover", "Lucky Clover", "🍀"),
        _system(Tier.UNCOMMON, "medal", "Silver Medal", "🥈"),
        _system(Tier.UNCOMMON, "star", "Shooting Star", "🌠"),
        _system(Tier.UNCOMMON, "key", "Old Key", "🗝️"),
    ),
    Tier.COMMON: (
        _system(Tier.COMMON, "gift", "Small Treat", "🎁"),
        _system(Tier.COMMON, "cookie", "Cookie", "🍪"),
        _system(Tier.COMMON, "balloon", "Balloon", "🎈"),
        _system(Tier.COMMON, "coin", "Copper Coin", "🪙"),
        _system(Tier.COMMON, "candy", "Candy", "🍬"),
    ),
}


def system_pool(tier: int | Tier) -> tuple[RewardDefinition, ...]:
    return SYSTEM_POOLS.get(Tier(int(tier)), ())
