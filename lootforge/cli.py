"""Command line helpers for LootForge."""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.table import Table

from .app import LootApp
from .config import LootForgeConfig
from .diagnostics.draw_simulator import DrawSimulator
from .domain.lottery import BASE_TIER_PROBABILITIES
from .domain.rewards import Tier
from .loaders import load_rewards_from_json, validate_rewards_file
from .validators import validate_app

console = Console()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="LootForge draw simulator")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--rewards", help="Path to reward list JSON file")
    source.add_argument("--module", help="Python module with register(app) function")
    parser.add_argument("--draws", type=int, default=10_000, help="Number of draws to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()
    _configure_logging(args.verbose)

    app = LootApp(LootForgeConfig.from_env())
    if args.rewards:
        load_rewards_from_json(app, Path(args.rewards))
    else:
        _load_module(args.module, app)
    asyncio.run(app.refresh_catalog(force=True))

    simulator = DrawSimulator(app, rng=Random(args.seed))
    result = simulator.simulate(draws=args.draws)

    table = Table(title=f"{result.draws} simulated draws over {len(app.catalog)} rewards")
    table.add_column("Tier")
    table.add_column("Draws", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Expected", justify="right")
    for tier in sorted(Tier):
        table.add_row(
            f"{int(tier)} {tier.label}",
            str(result.tiers[tier]),
            f"{result.share(tier):.2%}",
            f"{BASE_TIER_PROBABILITIES[tier]:.0%}",
        )
    console.print(table)
    if result.failures:
        console.print(f"[bold red]{result.failures} draws failed: reward pool is empty.[/bold red]")
        sys.exit(1)


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="LootForge validator")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--rewards", help="Path to reward list JSON file for validation")
    group.add_argument("--module", help="Python module with register(app) function to validate")
    args = parser.parse_args()

    if args.rewards:
        errors = validate_rewards_file(Path(args.rewards))
        if errors:
            console.print("[bold red]Reward list errors:[/bold red]")
            for err in errors:
                console.print(f"- {err}")
            sys.exit(1)
        console.print("[bold green]Reward list is valid ✅[/bold green]")
        return

    app = LootApp(LootForgeConfig.from_env())
    _load_module(args.module, app)
    issues = validate_app(app)
    if issues:
        console.print("[bold red]Configuration errors:[/bold red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)
    console.print("[bold green]Configuration is valid ✅[/bold green]")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_module(path: str, app: LootApp) -> None:
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    module = importlib.import_module(path)
    if hasattr(module, "register"):
        module.register(app)
    else:
        raise RuntimeError(f"Module {path} does not define register(app).")
