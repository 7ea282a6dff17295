"""New run command implementation."""

from pathlib import Path

import typer

from ..core import save_run
from ..models import Run, Segment
from ..output import get_output_context


def new(
    path: Path = typer.Argument(..., help="Run file to create"),
    game: str = typer.Option(..., "--game", "-g", help="Game name"),
    category: str = typer.Option(..., "--category", "-c", help="Category name"),
    segment: list[str] = typer.Option(
        ..., "--segment", "-s", help="Segment name (repeat in order)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Create a new run file with the given segments."""
    ctx = get_output_context()

    if path.exists() and not force:
        ctx.error(f"File already exists: {path} (use --force to overwrite)")
        raise typer.Exit(1)

    run = Run(
        game_name=game,
        category_name=category,
        segments=[Segment(name=name) for name in segment],
    )
    save_run(run, path)
    ctx.success(
        f"Created {path} with {len(run.segments)} segments",
        {"path": str(path), "segments": len(run.segments)},
    )
