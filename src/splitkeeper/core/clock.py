"""Clock abstraction used by the attempt timer.

Elapsed times are always taken from a monotonic source. Wall clock time is
only used to timestamp attempt start and end for history records.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Protocol

from ..models import TimeSpan


class Clock(Protocol):
    """Source of monotonic and wall clock time."""

    def now(self) -> TimeSpan:
        """Monotonic time; only differences between readings are meaningful."""
        ...

    def wall(self) -> datetime:
        """Current wall clock time (timezone aware)."""
        ...


class SystemClock:
    """Clock backed by time.monotonic and the system wall clock."""

    def now(self) -> TimeSpan:
        return TimeSpan(time.monotonic())

    def wall(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """Clock that only moves when told to.

    Used for replaying scripted attempts and for tests. The wall clock
    advances in lockstep with the monotonic reading.
    """

    def __init__(self, wall_start: datetime | None = None) -> None:
        self._elapsed = 0.0
        self._wall_start = wall_start or datetime(2000, 1, 1, tzinfo=timezone.utc)

    def now(self) -> TimeSpan:
        return TimeSpan(self._elapsed)

    def wall(self) -> datetime:
        return self._wall_start + timedelta(seconds=self._elapsed)

    def advance(self, seconds: float | TimeSpan) -> None:
        if isinstance(seconds, TimeSpan):
            seconds = seconds.total_seconds
        if seconds < 0:
            raise ValueError("ManualClock cannot run backwards")
        self._elapsed += seconds

    def set(self, seconds: float | TimeSpan) -> None:
        """Move to an absolute reading (never backwards)."""
        if isinstance(seconds, TimeSpan):
            seconds = seconds.total_seconds
        if seconds < self._elapsed:
            raise ValueError("ManualClock cannot run backwards")
        self._elapsed = float(seconds)
