"""Configuration models for LootForge."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Literal, Mapping

from .domain.daily_pool import DEFAULT_DAILY_QUOTAS
from .domain.rewards import Tier, coerce_tier

StorageBackend = Literal["memory", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure how balances, inventories, and the daily pool are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./lootforge.db"
        return None


@dataclass(slots=True)
class GachaConfig:
    """Points economy settings."""

    draw_cost: float = 1000.0
    starting_balance: float = 0.0


@dataclass(slots=True)
class RevealConfig:
    """Timing of the reveal animation handed to renderers."""

    duration_seconds: float = 4.0
    frames: int = 12


@dataclass(slots=True)
class DailyPoolConfig:
    quotas: Mapping[Tier, int] = field(default_factory=lambda: dict(DEFAULT_DAILY_QUOTAS))


@dataclass(slots=True)
class LootForgeConfig:
    """Top-level configuration container."""

    bot_token: str = ""
    storage: StorageConfig = field(default_factory=StorageConfig)
    gacha: GachaConfig = field(default_factory=GachaConfig)
    reveal: RevealConfig = field(default_factory=RevealConfig)
    daily_pool: DailyPoolConfig = field(default_factory=DailyPoolConfig)
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "LootForgeConfig":
        """Create config from environment variables prefixed with LOOTFORGE_."""
        prefix = "LOOTFORGE_"
        storage_backend = os.getenv(f"{prefix}STORAGE_BACKEND", "memory")
        if storage_backend not in {"memory", "sqlalchemy"}:
            raise ValueError(f"Unsupported {prefix}STORAGE_BACKEND '{storage_backend}'")

        quotas_raw = os.getenv(f"{prefix}DAILY_QUOTAS")
        seed_raw = os.getenv(f"{prefix}RNG_SEED")
        return cls(
            bot_token=os.getenv(f"{prefix}BOT_TOKEN", ""),
            storage=StorageConfig(
                backend=storage_backend,
                dsn=os.getenv(f"{prefix}STORAGE_DSN"),
                echo_sql=os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY,
            ),
            gacha=GachaConfig(
                draw_cost=float(os.getenv(f"{prefix}DRAW_COST", "1000")),
                starting_balance=float(os.getenv(f"{prefix}STARTING_BALANCE", "0")),
            ),
            reveal=RevealConfig(
                duration_seconds=float(os.getenv(f"{prefix}REVEAL_DURATION", "4.0")),
                frames=int(os.getenv(f"{prefix}REVEAL_FRAMES", "12")),
            ),
            daily_pool=DailyPoolConfig(
                quotas=_parse_quotas(quotas_raw) if quotas_raw else dict(DEFAULT_DAILY_QUOTAS)
            ),
            rng_seed=int(seed_raw) if seed_raw else None,
        )


def _parse_quotas(raw: str) -> Mapping[Tier, int]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON for LOOTFORGE_DAILY_QUOTAS") from exc
    if not isinstance(data, dict):
        raise ValueError("LOOTFORGE_DAILY_QUOTAS must be a JSON object")
    return {coerce_tier(int(k)): int(v) for k, v in data.items()}
