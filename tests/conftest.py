"""Shared test fixtures for splitkeeper tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from splitkeeper.core import AttemptTimer, ManualClock, save_run
from splitkeeper.models import Run, Segment, TimeSpan


def make_run(*names: str) -> Run:
    """Create a run with the given segment names (three by default)."""
    names = names or ("Forest", "Castle", "Tower")
    return Run(
        game_name="Test Game",
        category_name="Any%",
        segments=[Segment(name=name) for name in names],
    )


def play_attempt(
    timer: AttemptTimer,
    clock: ManualClock,
    segment_times: list[float],
    *,
    update_splits: bool = True,
) -> None:
    """Start, split after each segment time, then reset."""
    timer.start()
    for seconds in segment_times:
        clock.advance(seconds)
        timer.split()
    timer.reset(update_splits=update_splits)


def seconds(*values: float | None) -> list[TimeSpan | None]:
    """Shorthand for a list of optional TimeSpans."""
    return [None if v is None else TimeSpan.from_seconds(v) for v in values]


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def run() -> Run:
    """Three-segment run with no history."""
    return make_run()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def timer(run: Run, clock: ManualClock) -> AttemptTimer:
    """Timer over the three-segment run driven by the manual clock."""
    return AttemptTimer(run, clock)


@pytest.fixture
def run_file(tmp_path: Path) -> Path:
    """A saved three-segment run file."""
    path = tmp_path / "run.json"
    save_run(make_run(), path)
    return path


@pytest.fixture
def played(run: Run, clock: ManualClock) -> Callable[[list[float]], None]:
    """Play committed attempts against the run fixture."""

    def _play(segment_times: list[float]) -> None:
        play_attempt(AttemptTimer(run, clock), clock, segment_times)

    return _play
