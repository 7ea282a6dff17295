"""Core timing logic for splitkeeper.

This package contains the attempt state machine and everything it needs:
- timer: AttemptTimer state machine
- comparisons: Comparison generators, name resolution and cycling
- clock: Monotonic/wall clock abstraction
- shared: Reader/writer access for concurrent observers
- run_io: Versioned interchange format for runs
- lock_manager: Run file locking across processes
- replay: Scripted command replay
"""

from .clock import Clock, ManualClock, SystemClock
from .comparisons import (
    available_comparisons,
    generate_comparison,
    next_comparison,
    previous_comparison,
    resolve_comparison,
)
from .lock_manager import LockError, acquire_lock, locked_run, release_lock
from .replay import ScriptCommand, ScriptError, apply_script, parse_script
from .run_io import FORMAT_VERSION, RunParseError, export_run, import_run, load_run, save_run
from .shared import SharedTimer, TimerSnapshot
from .timer import AttemptTimer

__all__ = [
    "FORMAT_VERSION",
    "AttemptTimer",
    "Clock",
    "LockError",
    "ManualClock",
    "RunParseError",
    "ScriptCommand",
    "ScriptError",
    "SharedTimer",
    "SystemClock",
    "TimerSnapshot",
    "acquire_lock",
    "apply_script",
    "available_comparisons",
    "export_run",
    "generate_comparison",
    "import_run",
    "load_run",
    "locked_run",
    "next_comparison",
    "parse_script",
    "previous_comparison",
    "release_lock",
    "resolve_comparison",
    "save_run",
]
