"""Command line helpers for PlayForge."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .app import EconomyApp
from .config import PlayForgeConfig
from .diagnostics.economy_simulator import EconomySimulator
from .loaders import parse_levels_dict, validate_levels_file
from .validators import validate_app

console = Console()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="PlayForge progression simulator")
    parser.add_argument("levels", help="Path to levels JSON file")
    parser.add_argument("--hours", type=float, default=24.0, help="Simulated play time in hours")
    parser.add_argument("--referrals", type=int, default=0, help="Referrals made before playing")
    args = parser.parse_args()

    errors = validate_levels_file(args.levels)
    if errors:
        _report_errors("Level file errors:", errors)
        sys.exit(1)
    levels = parse_levels_dict(json.loads(Path(args.levels).read_text(encoding="utf-8")))

    config = PlayForgeConfig.from_env()
    simulator = EconomySimulator(config.economy)
    result = asyncio.run(simulator.simulate(levels, hours=args.hours, referrals=args.referrals))

    table = Table(title=f"Simulated {result.hours:g} h of play")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Levels completed", str(result.levels_completed))
    table.add_row("Coins earned", str(result.coins_earned))
    table.add_row("Energy spent", str(result.energy_spent))
    table.add_row("Minutes waiting for energy", f"{result.minutes_waiting:.1f}")
    table.add_row("Referral multiplier", f"{result.referral_multiplier:g}")
    if result.stopped_at_level is not None:
        table.add_row("Stopped at level", str(result.stopped_at_level))
    console.print(table)


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="PlayForge validator")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--levels",
        help="Path to levels JSON file for validation",
    )
    group.add_argument(
        "--config",
        action="store_true",
        help="Validate economy configuration read from PLAYFORGE_* variables",
    )
    args = parser.parse_args()

    if args.levels:
        errors = validate_levels_file(Path(args.levels))
        if errors:
            _report_errors("Level file errors:", errors)
            sys.exit(1)
        console.print("[bold green]Level file is valid[/bold green]")
        return

    app = EconomyApp(PlayForgeConfig.from_env())
    issues = validate_app(app)
    if issues:
        _report_errors("Configuration errors:", issues)
        sys.exit(1)
    console.print("[bold green]Economy configuration is valid[/bold green]")


def _report_errors(title: str, errors: list[str]) -> None:
    console.print(f"[bold red]{title}[/bold red]")
    for err in errors:
        console.print(f"- {err}", markup=False)
