"""Replay command implementation."""

import logging
from pathlib import Path

import typer

from ..core import (
    AttemptTimer,
    LockError,
    ManualClock,
    ScriptError,
    apply_script,
    locked_run,
    parse_script,
    save_run,
)
from ..models import TimerPhase
from ..output import get_output_context
from .common import get_config, load_run_or_exit, time_formatter

logger = logging.getLogger(__name__)


def replay(
    path: Path = typer.Argument(..., help="Run file to update"),
    script: Path = typer.Argument(..., help="Replay script (<seconds> <command> per line)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Replay without saving the run"),
) -> None:
    """Replay a scripted attempt against a run and save the result."""
    ctx = get_output_context()
    config = get_config()

    if not script.exists():
        ctx.error(f"Script not found: {script}")
        raise typer.Exit(1)
    try:
        commands = parse_script(script.read_text())
    except ScriptError as e:
        ctx.error(str(e), {"script": str(script)})
        raise typer.Exit(1) from None

    try:
        with locked_run(path, "replay"):
            run = load_run_or_exit(path)
            attempts_before = run.attempt_count
            pb_before = run.personal_best_time(config.timer.timing_method)

            clock = ManualClock()
            timer = AttemptTimer.from_config(run, config, clock)
            apply_script(timer, clock, commands)
            logger.debug("Replayed %d commands", len(commands))

            if not dry_run:
                save_run(run, path)
    except LockError as e:
        ctx.error(str(e))
        raise typer.Exit(3) from None

    method = config.timer.timing_method
    pb_after = run.personal_best_time(method)
    fmt = time_formatter(config)
    summary = {
        "path": str(path),
        "commands": len(commands),
        "attempts_added": run.attempt_count - attempts_before,
        "attempt_count": run.attempt_count,
        "personal_best": pb_after.total_seconds if pb_after is not None else None,
        "new_personal_best": pb_after != pb_before,
        "phase": timer.current_phase.value,
        "saved": not dry_run,
    }
    if ctx.json_mode:
        ctx.print_json(summary)
        return

    ctx.print(f"Replayed {len(commands)} commands from {script}")
    ctx.print(f"[bold]Attempts added:[/bold] {summary['attempts_added']}")
    ctx.print(f"[bold]Personal best:[/bold] {fmt(pb_after)}")
    if summary["new_personal_best"]:
        ctx.print("[green]New personal best![/green]")
    if timer.current_phase is not TimerPhase.NOT_STARTED:
        ctx.print("[yellow]Script ended with an attempt still open; it was not recorded[/yellow]")
    if dry_run:
        ctx.print("[cyan][DRY RUN][/cyan] Run file not modified")
    else:
        ctx.success(f"Saved {path}")
