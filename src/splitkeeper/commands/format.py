"""Format command implementation."""

import typer

from ..formatting import FORMATTERS, Accuracy, get_formatter
from ..models import TimeSpan
from ..output import get_output_context


def format_time(
    seconds: float = typer.Argument(..., help="Time in seconds (use -- before negatives)"),
    style: str = typer.Option("regular", "--style", "-s", help="Formatter style"),
    accuracy: Accuracy | None = typer.Option(None, "--accuracy", "-a", help="Sub-second digits"),
) -> None:
    """Format a time the way front-ends display it."""
    ctx = get_output_context()
    if style not in FORMATTERS:
        ctx.error(f"Unknown style: {style} (choose from {', '.join(FORMATTERS)})")
        raise typer.Exit(1)

    formatted = get_formatter(style, accuracy).format(TimeSpan.from_seconds(seconds))
    ctx.result({"seconds": seconds, "style": style, "formatted": formatted}, formatted)
