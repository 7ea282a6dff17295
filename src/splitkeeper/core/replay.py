"""Scripted replay of timer commands.

A replay script lists one command per line, prefixed with the time in
seconds (from script start) at which it is issued:

    # comments and blank lines are ignored
    0     start
    10.5  split
    12    pause
    14    pause
    25    skip
    40    split
    41    reset keep

Times must not decrease. Commands are applied to an AttemptTimer driven
by a ManualClock, so replays are deterministic.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from ..models import TimeSpan, TimingMethod
from .clock import ManualClock
from .timer import AttemptTimer


class ScriptError(Exception):
    """Replay script is malformed."""


@dataclass(frozen=True)
class ScriptCommand:
    """One parsed script line."""

    at: TimeSpan
    name: str
    argument: str | None
    line: int


_TIMING_METHODS = {
    "real": TimingMethod.REAL_TIME,
    "game": TimingMethod.GAME_TIME,
}


def _set_timing_method(timer: AttemptTimer, argument: str | None) -> None:
    if argument is None or argument == "toggle":
        timer.switch_timing_method()
    else:
        timer.set_current_timing_method(_TIMING_METHODS[argument])


def _seconds(argument: str | None) -> TimeSpan:
    assert argument is not None
    return TimeSpan.from_seconds(float(argument))


_COMMANDS: dict[str, Callable[[AttemptTimer, str | None], object]] = {
    "start": lambda timer, _: timer.start(),
    "split": lambda timer, _: timer.split(),
    "skip": lambda timer, _: timer.skip_split(),
    "undo": lambda timer, _: timer.undo_split(),
    "pause": lambda timer, _: timer.pause(),
    "resume": lambda timer, _: timer.resume(),
    "reset": lambda timer, arg: timer.reset(update_splits=arg != "discard"),
    "timing-method": _set_timing_method,
    "next-comparison": lambda timer, _: timer.switch_to_next_comparison(),
    "previous-comparison": lambda timer, _: timer.switch_to_previous_comparison(),
    "comparison": lambda timer, arg: timer.set_current_comparison(arg or ""),
    "init-game-time": lambda timer, _: timer.initialize_game_time(),
    "pause-game-time": lambda timer, _: timer.pause_game_time(),
    "resume-game-time": lambda timer, _: timer.resume_game_time(),
    "game-time": lambda timer, arg: timer.set_game_time(_seconds(arg)),
    "loading-times": lambda timer, arg: timer.set_loading_times(_seconds(arg)),
}

# Allowed arguments per command; None means free text, absent means no argument
_ARGUMENTS: dict[str, set[str] | None] = {
    "reset": {"keep", "discard"},
    "timing-method": {"real", "game", "toggle"},
    "comparison": None,
    "game-time": None,
    "loading-times": None,
}
_REQUIRED_ARGUMENT = {"comparison", "game-time", "loading-times"}
_NUMERIC_ARGUMENT = {"game-time", "loading-times"}

_LINE_PATTERN = re.compile(r"^(\S+)\s+(\S+)(?:\s+(.+))?$")


def _parse_line(line_no: int, line: str) -> ScriptCommand:
    match = _LINE_PATTERN.match(line)
    if not match:
        raise ScriptError(f"Line {line_no}: expected '<seconds> <command> [argument]'")

    raw_at, name, argument = match.group(1), match.group(2).lower(), match.group(3)
    try:
        at = float(raw_at)
    except ValueError:
        raise ScriptError(f"Line {line_no}: invalid time {raw_at!r}") from None
    if at < 0:
        raise ScriptError(f"Line {line_no}: time must not be negative")

    if name not in _COMMANDS:
        raise ScriptError(f"Line {line_no}: unknown command {name!r}")

    if argument is not None:
        argument = argument.strip()
        if name not in _ARGUMENTS:
            raise ScriptError(f"Line {line_no}: {name} takes no argument")
        allowed = _ARGUMENTS[name]
        if allowed is not None and argument.lower() not in allowed:
            raise ScriptError(
                f"Line {line_no}: {name} expects one of {', '.join(sorted(allowed))}"
            )
        if allowed is not None:
            argument = argument.lower()
    elif name in _REQUIRED_ARGUMENT:
        raise ScriptError(f"Line {line_no}: {name} requires an argument")

    if name in _NUMERIC_ARGUMENT:
        try:
            float(argument or "")
        except ValueError:
            raise ScriptError(f"Line {line_no}: {name} expects seconds") from None

    return ScriptCommand(at=TimeSpan.from_seconds(at), name=name, argument=argument, line=line_no)


def parse_script(content: str) -> list[ScriptCommand]:
    """Parse a replay script.

    Args:
        content: Script text

    Returns:
        Commands in script order

    Raises:
        ScriptError: On malformed lines, unknown commands or decreasing times
    """
    commands: list[ScriptCommand] = []
    for line_no, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        command = _parse_line(line_no, line)
        if commands and command.at < commands[-1].at:
            raise ScriptError(f"Line {line_no}: time goes backwards")
        commands.append(command)
    return commands


def apply_script(timer: AttemptTimer, clock: ManualClock, commands: list[ScriptCommand]) -> None:
    """Issue each command to the timer at its scripted time.

    The clock must be the one driving the timer.
    """
    for command in commands:
        clock.set(command.at)
        _COMMANDS[command.name](timer, command.argument)
