"""Restart watchdog CLI application.

This module provides the command-line interface for the restart watchdog,
including the poll loop and configuration utilities.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Final

import typer

from ocwatchdog.controller import Watchdog
from ocwatchdog.devices.redstone import RedstoneCapability
from ocwatchdog.scheduling import Scheduler
from ocwatchdog.settings.user import WatchdogSettings
from ocwatchdog.timesource.api import WorldTimeAPI
from ocwatchdog.utils.time import TimeUtils

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Server restart watchdog CLI", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "ocwatchdog.cli"


class Tier(str, Enum):
    basic = "basic"
    advanced = "advanced"


TIER_CAPABILITIES: Final = {
    Tier.basic: RedstoneCapability.BASIC_ONLY,
    Tier.advanced: RedstoneCapability.WIRELESS_AND_BUNDLED,
}

# Options for the main command
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", dir_okay=False, help="Config file (created if missing)"
)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
ONCE_OPTION = typer.Option(False, "--once", "-1", help="Run one cycle then exit")
SIMULATE_OPTION = typer.Option(
    False, "--simulate-redstone", help="Drive an in-memory redstone card"
)
TIER_OPTION = typer.Option(Tier.basic, "--tier", help="Simulated redstone card tier")
DST_ARGUMENT = typer.Argument(..., help="Output config.yaml")
FORCE_OPTION = typer.Option(False, "--force", "-f", help="Overwrite an existing file")


@app.command()
def run(
    config: Path | None = CONFIG_OPTION,
    once: bool = ONCE_OPTION,
    debug: bool = DEBUG_OPTION,
    simulate_redstone: bool = SIMULATE_OPTION,
    tier: Tier = TIER_OPTION,
) -> None:
    """Run the restart watchdog."""
    try:
        watchdog = Watchdog(config, debug=debug)
    except ValueError as exc:
        typer.secho(f"No usable time source, watchdog cannot run: {exc}", fg="red", err=True)
        raise typer.Exit(code=1) from exc

    if watchdog.actuator is None and simulate_redstone and watchdog.config.redstone.enabled:
        watchdog.actuator = Watchdog.create_simulated_actuator(
            watchdog.config, TIER_CAPABILITIES[tier]
        )

    if not Scheduler(watchdog).run(once=once):
        raise typer.Exit(code=1)


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        cfg = WatchdogSettings.load(file)
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    try:
        WorldTimeAPI(cfg.time_api_url)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    hours = ", ".join(f"{h:02d}:{cfg.minute:02d}" for h in cfg.hours) or "none"
    typer.echo("✅ Config valid")
    typer.echo(f"Restarts: {hours} ({TimeUtils.format_offset(cfg.offset)})")


@config_app.command("init")
def init_config(dst: Path = DST_ARGUMENT, force: bool = FORCE_OPTION):
    """Write a config file populated with the default settings."""
    if dst.exists() and not force:
        typer.secho(f"{dst} already exists (use --force to overwrite)", fg="red", err=True)
        raise typer.Exit(code=1)

    WatchdogSettings().save(dst)
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
