"""splitkeeper CLI: manage runs and replay timed attempts."""

import typer
from rich.console import Console

from splitkeeper import __version__

from .commands import (
    comparisons_cmd,
    format_time,
    history,
    init,
    new,
    replay,
    show,
    validate,
)
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"splitkeeper {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="splitkeeper",
    help="Segment timer with personal bests and comparisons",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """splitkeeper - segment timing with live comparisons."""
    configure_logging(verbosity=verbose, quiet=quiet, no_color=no_color)
    console = Console(no_color=no_color)
    set_output_context(OutputContext(console=console, json_mode=json_output))


app.command()(init)
app.command()(new)
app.command()(show)
app.command()(history)
app.command("comparisons")(comparisons_cmd)
app.command()(replay)
app.command()(validate)
app.command("format")(format_time)


if __name__ == "__main__":
    app()
