"""CLI integration tests for splitkeeper."""

import json
from pathlib import Path
from unittest import mock

import pytest
from typer.testing import CliRunner

from splitkeeper.cli import app
from splitkeeper.core import load_run
from splitkeeper.core.lock_manager import lock_path_for
from splitkeeper.models import Lock

FULL_ATTEMPT = "0 start\n10 split\n25 split\n40 split\n41 reset keep\n"


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run CLI commands from an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def new_run(runner: CliRunner, workdir: Path) -> Path:
    """A run.json created through the CLI."""
    result = runner.invoke(
        app,
        ["new", "run.json", "-g", "Test Game", "-c", "Any%", "-s", "A", "-s", "B", "-s", "C"],
    )
    assert result.exit_code == 0
    return workdir / "run.json"


@pytest.fixture
def script(workdir: Path) -> Path:
    path = workdir / "attempt.txt"
    path.write_text(FULL_ATTEMPT)
    return path


class TestVersionCommand:
    """Tests for --version flag."""

    def test_version_shows_version(self, runner: CliRunner) -> None:
        """--version should display version string."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "splitkeeper" in result.stdout
        assert "0.1.0" in result.stdout

    def test_version_short_flag(self, runner: CliRunner) -> None:
        """-V should also display version."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert "splitkeeper" in result.stdout


class TestHelpCommand:
    """Tests for --help flag."""

    def test_help_shows_commands(self, runner: CliRunner) -> None:
        """--help should list all available commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("init", "new", "show", "history", "comparisons", "replay", "format"):
            assert command in result.stdout


class TestGlobalOptions:
    """Tests for global CLI options."""

    @pytest.mark.parametrize("flag", ["-v", "-q", "--json", "--no-color"])
    def test_flag_accepted(self, runner: CliRunner, flag: str) -> None:
        result = runner.invoke(app, [flag, "--help"])
        assert result.exit_code == 0


class TestInitCommand:
    """Tests for splitkeeper init command."""

    def test_init_creates_config(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (workdir / ".splitkeeper" / "config.toml").exists()
        assert "Created config template" in result.stdout

    def test_init_already_initialized(self, runner: CliRunner, workdir: Path) -> None:
        """init should leave an existing config alone."""
        runner.invoke(app, ["init"])
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert "already exists" in result.stdout.lower()


class TestNewCommand:
    """Tests for splitkeeper new command."""

    def test_new_creates_run(self, new_run: Path) -> None:
        run = load_run(new_run)
        assert run.game_name == "Test Game"
        assert [s.name for s in run.segments] == ["A", "B", "C"]
        assert run.attempt_count == 0

    def test_new_refuses_overwrite(self, runner: CliRunner, new_run: Path) -> None:
        result = runner.invoke(app, ["new", "run.json", "-g", "X", "-c", "Y", "-s", "Z"])
        assert result.exit_code == 1
        assert "already exists" in result.stdout
        assert load_run(new_run).game_name == "Test Game"

    def test_new_force_overwrites(self, runner: CliRunner, new_run: Path) -> None:
        result = runner.invoke(
            app, ["new", "run.json", "-g", "X", "-c", "Y", "-s", "Z", "--force"]
        )
        assert result.exit_code == 0
        assert load_run(new_run).game_name == "X"


class TestValidateCommand:
    """Tests for splitkeeper validate command."""

    def test_valid_run(self, runner: CliRunner, new_run: Path) -> None:
        result = runner.invoke(app, ["validate", "run.json"])
        assert result.exit_code == 0
        assert "Valid run" in result.stdout

    def test_invalid_run(self, runner: CliRunner, workdir: Path) -> None:
        (workdir / "bad.json").write_text("{}")
        result = runner.invoke(app, ["validate", "bad.json"])
        assert result.exit_code == 1

    def test_missing_run(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(app, ["validate", "missing.json"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_json_output(self, runner: CliRunner, new_run: Path) -> None:
        result = runner.invoke(app, ["--json", "validate", "run.json"])
        data = json.loads(result.stdout)
        assert data["segments"] == 3
        assert data["attempts"] == 0


class TestReplayCommand:
    """Tests for splitkeeper replay command."""

    def test_replay_records_attempt(
        self, runner: CliRunner, new_run: Path, script: Path
    ) -> None:
        result = runner.invoke(app, ["-q", "replay", "run.json", "attempt.txt"])
        assert result.exit_code == 0
        assert "New personal best" in result.stdout

        run = load_run(new_run)
        assert run.attempt_count == 1
        assert run.segments[-1].split_time(run.attempt_history[0].timing_method) is not None
        assert not lock_path_for(new_run).exists()

    def test_replay_json_summary(self, runner: CliRunner, new_run: Path, script: Path) -> None:
        result = runner.invoke(app, ["-q", "--json", "replay", "run.json", "attempt.txt"])
        assert result.exit_code == 0
        summary = json.loads(result.stdout)
        assert summary["attempts_added"] == 1
        assert summary["personal_best"] == 40.0
        assert summary["new_personal_best"] is True
        assert summary["phase"] == "not_started"
        assert summary["saved"] is True

    def test_replay_slower_attempt_keeps_pb(
        self, runner: CliRunner, new_run: Path, script: Path, workdir: Path
    ) -> None:
        runner.invoke(app, ["-q", "replay", "run.json", "attempt.txt"])
        (workdir / "slow.txt").write_text("0 start\n12 split\n30 split\n45 split\n46 reset\n")
        result = runner.invoke(app, ["-q", "--json", "replay", "run.json", "slow.txt"])
        summary = json.loads(result.stdout)
        assert summary["attempt_count"] == 2
        assert summary["personal_best"] == 40.0
        assert summary["new_personal_best"] is False

    def test_dry_run_does_not_save(
        self, runner: CliRunner, new_run: Path, script: Path
    ) -> None:
        result = runner.invoke(app, ["-q", "replay", "run.json", "attempt.txt", "--dry-run"])
        assert result.exit_code == 0
        assert "DRY RUN" in result.stdout
        assert load_run(new_run).attempt_count == 0

    def test_open_attempt_reported(
        self, runner: CliRunner, new_run: Path, workdir: Path
    ) -> None:
        (workdir / "open.txt").write_text("0 start\n10 split\n")
        result = runner.invoke(app, ["-q", "replay", "run.json", "open.txt"])
        assert result.exit_code == 0
        assert "still open" in result.stdout
        assert load_run(new_run).attempt_count == 0

    def test_bad_script(self, runner: CliRunner, new_run: Path, workdir: Path) -> None:
        (workdir / "bad.txt").write_text("0 start\n1 teleport\n")
        result = runner.invoke(app, ["replay", "run.json", "bad.txt"])
        assert result.exit_code == 1
        assert "unknown command" in result.stdout

    def test_missing_script(self, runner: CliRunner, new_run: Path) -> None:
        result = runner.invoke(app, ["replay", "run.json", "nope.txt"])
        assert result.exit_code == 1

    def test_missing_run(self, runner: CliRunner, workdir: Path, script: Path) -> None:
        result = runner.invoke(app, ["replay", "missing.json", "attempt.txt"])
        assert result.exit_code == 1
        assert not (workdir / "missing.json.lock").exists()

    def test_locked_run(self, runner: CliRunner, new_run: Path, script: Path) -> None:
        """replay exits 3 while another live process holds the run."""
        foreign = Lock(pid=99999, run_file="run.json", command="replay")
        lock_path_for(new_run).write_text(foreign.model_dump_json())
        with mock.patch("splitkeeper.core.lock_manager._is_pid_running", return_value=True):
            result = runner.invoke(app, ["replay", "run.json", "attempt.txt"])
        assert result.exit_code == 3
        assert "locked" in result.stdout
        assert load_run(new_run).attempt_count == 0


class TestShowCommands:
    """Tests for show, history and comparisons."""

    @pytest.fixture
    def played_run(self, runner: CliRunner, new_run: Path, script: Path) -> Path:
        result = runner.invoke(app, ["-q", "replay", "run.json", "attempt.txt"])
        assert result.exit_code == 0
        return new_run

    def test_show_table(self, runner: CliRunner, played_run: Path) -> None:
        result = runner.invoke(app, ["show", "run.json"])
        assert result.exit_code == 0
        assert "Test Game" in result.stdout
        assert "0:40.00" in result.stdout

    def test_show_json(self, runner: CliRunner, played_run: Path) -> None:
        result = runner.invoke(app, ["--json", "show", "run.json"])
        data = json.loads(result.stdout)
        assert data["comparison"] == "Personal Best"
        assert data["timing_method"] == "real_time"
        assert [s["split_time"] for s in data["segments"]] == [10.0, 25.0, 40.0]
        assert [s["best_segment_time"] for s in data["segments"]] == [10.0, 15.0, 15.0]

    def test_show_other_comparison(self, runner: CliRunner, played_run: Path) -> None:
        result = runner.invoke(app, ["--json", "show", "run.json", "-c", "Best Segments"])
        data = json.loads(result.stdout)
        assert [s["comparison_time"] for s in data["segments"]] == [10.0, 25.0, 40.0]

    def test_show_unknown_comparison_falls_back(
        self, runner: CliRunner, played_run: Path
    ) -> None:
        result = runner.invoke(app, ["--json", "show", "run.json", "-c", "Nobody"])
        assert json.loads(result.stdout)["comparison"] == "Personal Best"

    def test_show_uses_config(
        self, runner: CliRunner, played_run: Path, workdir: Path
    ) -> None:
        config_dir = workdir / ".splitkeeper"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[timer]\ntiming_method = "game_time"\n')
        result = runner.invoke(app, ["--json", "show", "run.json"])
        data = json.loads(result.stdout)
        assert data["timing_method"] == "game_time"
        assert data["segments"][0]["split_time"] is None

    def test_history_json(self, runner: CliRunner, played_run: Path) -> None:
        result = runner.invoke(app, ["--json", "history", "run.json"])
        attempts = json.loads(result.stdout)["attempts"]
        assert len(attempts) == 1
        assert attempts[0]["index"] == 1
        assert attempts[0]["segment_times"] == [10.0, 15.0, 15.0]

    def test_history_empty(self, runner: CliRunner, new_run: Path) -> None:
        result = runner.invoke(app, ["history", "run.json"])
        assert result.exit_code == 0
        assert "No attempts recorded" in result.stdout

    def test_comparisons_json(self, runner: CliRunner, played_run: Path) -> None:
        result = runner.invoke(app, ["--json", "comparisons", "run.json"])
        finals = json.loads(result.stdout)["comparisons"]
        assert list(finals) == [
            "Personal Best",
            "Best Segments",
            "Average Segments",
            "Median Segments",
            "Worst Segments",
            "Latest Run",
        ]
        assert finals["Latest Run"] == 40.0


class TestFormatCommand:
    """Tests for splitkeeper format command."""

    def test_default_style(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["format", "3723.45"])
        assert result.exit_code == 0
        assert "1:02:03.45" in result.stdout

    def test_negative_segment_time(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["format", "--style", "segment", "--", "-263.5"])
        assert result.exit_code == 0
        assert "−4:23.50" in result.stdout

    def test_accuracy(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["--json", "format", "1.25", "-s", "delta", "-a", "hundredths"]
        )
        assert json.loads(result.stdout)["formatted"] == "+1.25"

    def test_unknown_style(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["format", "1", "--style", "fancy"])
        assert result.exit_code == 1
        assert "Unknown style" in result.stdout
