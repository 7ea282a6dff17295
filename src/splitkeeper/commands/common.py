"""Helpers shared by CLI commands."""

from pathlib import Path

import typer

from ..config import SplitkeeperConfig, load_config
from ..constants import CONFIG_DIR
from ..core import RunParseError, load_run
from ..formatting import Days, Regular, TimeFormatter
from ..models import Run
from ..output import get_output_context


def get_config_dir() -> Path:
    return Path.cwd() / CONFIG_DIR


def get_config() -> SplitkeeperConfig:
    """Load the configuration of the current directory."""
    return load_config(get_config_dir())


def load_run_or_exit(path: Path) -> Run:
    """Load a run file, exiting with code 1 if it is missing or invalid."""
    ctx = get_output_context()
    if not path.exists():
        ctx.error(f"Run file not found: {path}")
        raise typer.Exit(1)
    try:
        return load_run(path)
    except RunParseError as e:
        ctx.error(str(e), {"path": str(path)})
        raise typer.Exit(1) from None


def time_formatter(config: SplitkeeperConfig) -> TimeFormatter:
    """Formatter for split times according to display settings."""
    if config.display.show_days:
        return Days(config.display.accuracy)
    return Regular(config.display.accuracy)
