"""Validation utilities for LootForge applications."""

from __future__ import annotations

from .app import LootApp
from .domain.crafting import TRADE_UP_REQUIREMENTS
from .domain.rewards import Tier
from .domain.system_pool import system_pool


def validate_app(app: LootApp) -> list[str]:
    """Return list of validation errors discovered in configured app."""
    errors: list[str] = []

    master = app.composer.master
    if not master:
        errors.append("No rewards registered in the master list.")
    elif all(reward.tier == Tier.LEGENDARY for reward in master):
        errors.append("Master list only holds tier 1 rewards; draws would have nothing to pick.")

    seen: set[str] = set()
    for reward in master:
        if reward.reward_id in seen:
            errors.append(f"Reward '{reward.reward_id}' registered multiple times.")
        seen.add(reward.reward_id)
        if reward.aura_colors and reward.tier != Tier.LEGENDARY:
            errors.append(f"Reward '{reward.reward_id}' has aura colors but is not tier 1.")

    for target in TRADE_UP_REQUIREMENTS:
        has_custom = any(reward.tier == target for reward in master)
        if not has_custom and not system_pool(target):
            errors.append(f"Trade-up into tier {int(target)} has no reward pool.")

    gacha = app.config.gacha
    if gacha.draw_cost < 0:
        errors.append("Gacha configuration 'draw_cost' cannot be negative.")
    if gacha.starting_balance < 0:
        errors.append("Gacha configuration 'starting_balance' cannot be negative.")

    reveal = app.config.reveal
    if reveal.duration_seconds < 0:
        errors.append("Reveal configuration 'duration_seconds' cannot be negative.")
    if reveal.frames <= 0:
        errors.append("Reveal configuration 'frames' must be positive.")

    for tier, quota in app.config.daily_pool.quotas.items():
        if quota < 0:
            errors.append(f"Daily pool quota for tier {int(tier)} cannot be negative.")
    if not any(
        quota > 0 for tier, quota in app.config.daily_pool.quotas.items() if tier != Tier.LEGENDARY
    ):
        errors.append("Daily pool quotas leave no drawable tier.")

    return errors


__all__ = ["validate_app"]
