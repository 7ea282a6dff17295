"""Show, history and comparisons command implementations."""

from pathlib import Path

import typer

from ..components import title_state
from ..core import available_comparisons, generate_comparison, resolve_comparison
from ..formatting import SegmentTime
from ..models import TimeSpan, TimingMethod
from ..output import get_output_context
from .common import get_config, load_run_or_exit, time_formatter


def show(
    path: Path = typer.Argument(..., help="Run file"),
    comparison: str | None = typer.Option(
        None, "--comparison", "-c", help="Comparison to show (defaults to config)"
    ),
    method: TimingMethod | None = typer.Option(
        None, "--method", "-m", help="Timing method (defaults to config)"
    ),
) -> None:
    """Show a run's segments with reference and comparison times."""
    ctx = get_output_context()
    config = get_config()
    run = load_run_or_exit(path)

    method = method or config.timer.timing_method
    name = resolve_comparison(run, comparison or config.timer.comparison)
    if comparison is not None and name != comparison:
        ctx.print(f"[yellow]Unknown comparison {comparison!r}, using {name}[/yellow]")

    title = title_state(
        run,
        show_region=config.display.show_region,
        show_platform=config.display.show_platform,
    )
    compared = generate_comparison(run, name, method, config.comparisons.history_window)
    fmt = time_formatter(config)
    segment_fmt = SegmentTime(config.display.accuracy)

    if ctx.json_mode:
        ctx.print_json(
            {
                "game": title.game,
                "category": title.category,
                "attempts": title.attempts,
                "timing_method": method.value,
                "comparison": name,
                "segments": [
                    {
                        "name": segment.name,
                        "split_time": _seconds(segment.split_time(method)),
                        "best_segment_time": _seconds(segment.best_segment_time(method)),
                        "comparison_time": _seconds(compared_time),
                    }
                    for segment, compared_time in zip(run.segments, compared, strict=True)
                ],
            }
        )
        return

    ctx.print(f"\n[bold]{title.game}[/bold] - {title.category}")
    ctx.print(f"[bold]Attempts:[/bold] {title.attempts}")
    ctx.table(
        f"{name} ({method.value})",
        ["#", "Segment", "Personal Best", "Best Segment", name],
        [
            [
                str(index),
                segment.name,
                fmt(segment.split_time(method)),
                segment_fmt(segment.best_segment_time(method)),
                fmt(compared_time),
            ]
            for index, (segment, compared_time) in enumerate(
                zip(run.segments, compared, strict=True), start=1
            )
        ],
    )


def history(path: Path = typer.Argument(..., help="Run file")) -> None:
    """List the committed attempts of a run."""
    ctx = get_output_context()
    config = get_config()
    run = load_run_or_exit(path)
    fmt = time_formatter(config)

    if ctx.json_mode:
        ctx.print_json(
            {
                "attempts": [
                    entry.model_dump(mode="json") for entry in run.attempt_history
                ],
            }
        )
        return

    if not run.attempt_history:
        ctx.print("No attempts recorded")
        return

    ctx.table(
        f"{run.game_name} - {run.category_name}",
        ["#", "Started", "Finished", "Method", "Time"],
        [
            [
                str(entry.index),
                entry.started.strftime("%Y-%m-%d %H:%M:%S"),
                "yes" if entry.completed else "no",
                entry.timing_method.value,
                fmt(entry.total_time),
            ]
            for entry in run.attempt_history
        ],
    )


def comparisons_cmd(
    path: Path = typer.Argument(..., help="Run file"),
    method: TimingMethod | None = typer.Option(None, "--method", "-m", help="Timing method"),
) -> None:
    """List available comparisons with their final times."""
    ctx = get_output_context()
    config = get_config()
    run = load_run_or_exit(path)
    method = method or config.timer.timing_method
    fmt = time_formatter(config)

    finals: dict[str, TimeSpan | None] = {}
    for name in available_comparisons(run):
        times = generate_comparison(run, name, method, config.comparisons.history_window)
        finals[name] = times[-1] if times else None

    if ctx.json_mode:
        ctx.print_json(
            {
                "timing_method": method.value,
                "comparisons": {name: _seconds(final) for name, final in finals.items()},
            }
        )
        return

    rows = [
        [name, "custom" if name in run.custom_comparisons else "built-in", fmt(final)]
        for name, final in finals.items()
    ]
    ctx.table(f"Comparisons ({method.value})", ["Name", "Kind", "Final Time"], rows)


def _seconds(time: TimeSpan | None) -> float | None:
    return None if time is None else time.total_seconds
