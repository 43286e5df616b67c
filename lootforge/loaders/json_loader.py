"""Load the master reward list from JSON definitions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, TYPE_CHECKING

from ..domain.rewards import RewardDefinition, Tier

if TYPE_CHECKING:
    from ..app import LootApp

_HEX_DIGITS = set("0123456789abcdefABCDEF")


def load_rewards_from_json(app: "LootApp", path: str | Path) -> tuple[RewardDefinition, ...]:
    """Load reward definitions from a JSON file and register them on the app."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    definitions = parse_rewards_dict(data)
    app.register_rewards(definitions)
    return definitions


def parse_rewards_dict(data: dict[str, Any]) -> tuple[RewardDefinition, ...]:
    """Parse a decoded JSON document into reward definitions."""
    errors = validate_rewards_dict(data)
    if errors:
        raise ValueError(_format_errors("Reward list validation failed", errors))
    return tuple(RewardDefinition.from_dict(entry) for entry in data["rewards"])


def dump_rewards(definitions: Iterable[RewardDefinition]) -> dict[str, Any]:
    return {"rewards": [definition.to_dict() for definition in definitions]}


def validate_rewards_file(path: str | Path) -> list[str]:
    """Validate a reward JSON file and return a list of errors."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return validate_rewards_dict(data)


def validate_rewards_dict(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Reward list must be a JSON object."]

    rewards_raw = data.get("rewards")
    if not isinstance(rewards_raw, list) or not rewards_raw:
        return ["Reward list must contain non-empty 'rewards' array."]

    reward_ids: set[str] = set()
    for idx, entry in enumerate(rewards_raw, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Reward #{idx} must be an object.")
            continue
        reward_id = entry.get("id")
        if not isinstance(reward_id, str) or not reward_id.strip():
            errors.append(f"Reward #{idx} must define non-empty 'id'.")
            continue
        if reward_id in reward_ids:
            errors.append(f"Reward id '{reward_id}' defined multiple times.")
        reward_ids.add(reward_id)
        if reward_id.startswith("system:"):
            errors.append(f"Reward id '{reward_id}' uses the reserved 'system:' prefix.")

        for field_name in ("name", "image"):
            value = entry.get(field_name)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"Reward '{reward_id}' must define non-empty '{field_name}'.")

        tier = entry.get("tier")
        if not isinstance(tier, int) or isinstance(tier, bool) or tier not in {t.value for t in Tier}:
            errors.append(f"Reward '{reward_id}' has invalid tier '{tier}'.")

        description = entry.get("description")
        if description is not None and not isinstance(description, str):
            errors.append(f"Reward '{reward_id}' description must be a string.")

        aura = entry.get("auraColors")
        if aura is not None:
            if not isinstance(aura, list) or not aura:
                errors.append(f"Reward '{reward_id}' auraColors must be a non-empty array.")
            elif not all(_is_hex_color(color) for color in aura):
                errors.append(f"Reward '{reward_id}' auraColors must contain '#rrggbb' colors.")
            if tier != Tier.LEGENDARY:
                errors.append(f"Reward '{reward_id}' auraColors are only allowed on tier 1.")

    return errors


def _is_hex_color(value: Any) -> bool:
    return (
        isinstance(value, str)
        and len(value) == 7
        and value.startswith("#")
        and all(char in _HEX_DIGITS for char in value[1:])
    )


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
