"""Loaders for declarative reward definitions."""

from .json_loader import (
    dump_rewards,
    load_rewards_from_json,
    parse_rewards_dict,
    validate_rewards_dict,
    validate_rewards_file,
)

__all__ = [
    "dump_rewards",
    "load_rewards_from_json",
    "parse_rewards_dict",
    "validate_rewards_dict",
    "validate_rewards_file",
]
