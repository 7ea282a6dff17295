"""Reader/writer access to an attempt timer.

One logical control thread issues commands through ``write()``; any number
of observers (e.g. a rendering loop) read through ``read()`` or
``snapshot()``. A reader never observes a partially applied command.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ..models import Run, Time, TimerPhase, TimingMethod
from .timer import AttemptTimer


class ReadWriteLock:
    """Many readers or one writer; waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass(frozen=True)
class TimerSnapshot:
    """Consistent view of a timer at one instant."""

    phase: TimerPhase
    current_split_index: int
    timing_method: TimingMethod
    comparison: str
    current_time: Time
    run: Run


class SharedTimer:
    """An AttemptTimer guarded by a reader/writer lock.

    Example:
        >>> shared = SharedTimer(AttemptTimer(run))
        >>> with shared.write() as timer:
        ...     timer.start()
        >>> shared.snapshot().phase
        <TimerPhase.RUNNING: 'running'>
    """

    def __init__(self, timer: AttemptTimer) -> None:
        self._timer = timer
        self._lock = ReadWriteLock()

    @contextmanager
    def write(self) -> Iterator[AttemptTimer]:
        """Exclusive access for issuing commands."""
        with self._lock.write_locked():
            yield self._timer

    @contextmanager
    def read(self) -> Iterator[AttemptTimer]:
        """Shared access for queries; callers must not issue commands."""
        with self._lock.read_locked():
            yield self._timer

    def snapshot(self) -> TimerSnapshot:
        with self._lock.read_locked():
            timer = self._timer
            return TimerSnapshot(
                phase=timer.current_phase,
                current_split_index=timer.current_split_index,
                timing_method=timer.current_timing_method,
                comparison=timer.current_comparison,
                current_time=timer.current_time(),
                run=timer.clone_run(),
            )
