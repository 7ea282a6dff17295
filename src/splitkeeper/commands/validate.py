"""Validate command implementation."""

from pathlib import Path

import typer

from ..output import get_output_context
from .common import load_run_or_exit


def validate(path: Path = typer.Argument(..., help="Run file to check")) -> None:
    """Check that a run file can be imported."""
    ctx = get_output_context()
    run = load_run_or_exit(path)
    ctx.success(
        f"Valid run: {run.game_name} - {run.category_name}",
        {
            "path": str(path),
            "segments": len(run.segments),
            "attempts": run.attempt_count,
        },
    )
