"""Tests for the run interchange format."""

import json
from pathlib import Path

import pytest
from conftest import make_run, play_attempt
from hypothesis import given
from hypothesis import strategies as st

from splitkeeper.core import (
    FORMAT_VERSION,
    AttemptTimer,
    ManualClock,
    RunParseError,
    export_run,
    import_run,
    load_run,
    save_run,
)
from splitkeeper.models import FixedComparison, Run, Statistic, StatisticComparison, TimingMethod


@pytest.fixture
def rich_run() -> Run:
    """A run with history, bests, icons and custom comparisons."""
    run = make_run()
    run.region = "PAL"
    run.variables = {"Glitches": "Yes"}
    run.set_game_icon(b"\x89PNG\r\n\x1a\n")
    run.segments[1].icon = b"\x00\x01\x02"
    clock = ManualClock()
    timer = AttemptTimer(run, clock)
    timer.initialize_game_time()
    play_attempt(timer, clock, [10, 15, 15])
    timer.start()
    clock.advance(4)
    timer.pause()
    clock.advance(2)
    timer.reset()
    run.add_custom_comparison(
        "Rival", FixedComparison(split_times={TimingMethod.REAL_TIME: [None, 20.5, 39.25]})
    )
    run.add_custom_comparison(
        "Recent", StatisticComparison(statistic=Statistic.MEDIAN, last_n=3)
    )
    return run


class TestExportImport:
    """Tests for export_run and import_run."""

    def test_round_trip(self, rich_run: Run) -> None:
        assert import_run(export_run(rich_run)) == rich_run

    def test_export_is_idempotent(self, rich_run: Run) -> None:
        """Export, import and export again yields identical bytes."""
        first = export_run(rich_run)
        assert export_run(import_run(first)) == first

    def test_document_is_versioned(self, rich_run: Run) -> None:
        document = json.loads(export_run(rich_run))
        assert document["format_version"] == FORMAT_VERSION
        assert document["run"]["game_name"] == "Test Game"

    def test_icons_are_base64(self, rich_run: Run) -> None:
        document = json.loads(export_run(rich_run))
        assert document["run"]["game_icon"] == "iVBORw0KGgo="
        assert document["run"]["segments"][0]["icon"] is None

    def test_import_accepts_bytes(self, rich_run: Run) -> None:
        assert import_run(export_run(rich_run).encode()) == rich_run

    def test_import_creates_new_run(self, rich_run: Run) -> None:
        assert import_run(export_run(rich_run)) is not rich_run

    @given(
        game=st.text(max_size=20),
        names=st.lists(st.text(max_size=10), min_size=1, max_size=5),
    )
    def test_round_trip_arbitrary_names(self, game: str, names: list[str]) -> None:
        run = make_run(*names)
        run.game_name = game
        assert import_run(export_run(run)) == run


class TestImportErrors:
    """Malformed input never yields a run."""

    @pytest.mark.parametrize(
        "data",
        [
            "",
            "garbage",
            "[]",
            '{"format_version": 1}',
            '{"format_version": 2, "run": {}}',
            '{"format_version": 1, "run": {"attempt_count": -1}}',
            '{"format_version": 1, "run": {"segments": [{"name": 5}]}}',
        ],
    )
    def test_invalid_documents(self, data: str) -> None:
        with pytest.raises(RunParseError):
            import_run(data)

    def test_truncated_document(self, rich_run: Run) -> None:
        data = export_run(rich_run)
        with pytest.raises(RunParseError):
            import_run(data[: len(data) // 2])

    def test_inconsistent_history(self, rich_run: Run) -> None:
        document = json.loads(export_run(rich_run))
        document["run"]["segments"].pop()
        with pytest.raises(RunParseError, match="segment times"):
            import_run(json.dumps(document))

    def test_minimal_document(self) -> None:
        run = import_run('{"format_version": 1, "run": {}}')
        assert run.segments == []
        assert run.attempt_count == 0


class TestFiles:
    """Tests for save_run and load_run."""

    def test_save_and_load(self, tmp_path: Path, rich_run: Run) -> None:
        path = tmp_path / "run.json"
        save_run(rich_run, path)
        assert load_run(path) == rich_run
        assert not (tmp_path / "run.json.tmp").exists()

    def test_save_overwrites(self, tmp_path: Path, rich_run: Run) -> None:
        path = tmp_path / "run.json"
        save_run(make_run(), path)
        save_run(rich_run, path)
        assert load_run(path).attempt_count == 2

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_run(tmp_path / "missing.json")

    def test_load_garbage_file(self, tmp_path: Path) -> None:
        path = tmp_path / "run.json"
        path.write_text("not a run")
        with pytest.raises(RunParseError):
            load_run(path)
