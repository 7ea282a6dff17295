"""Timing methods, timer phases and the dual-clock Time value."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .time_span import TimeSpan


class TimingMethod(str, Enum):
    """The two independently tracked clocks a run's times are keyed by."""

    REAL_TIME = "real_time"
    GAME_TIME = "game_time"

    def other(self) -> "TimingMethod":
        """Return the opposite timing method."""
        if self is TimingMethod.REAL_TIME:
            return TimingMethod.GAME_TIME
        return TimingMethod.REAL_TIME


class TimerPhase(str, Enum):
    """Phases of the attempt state machine."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


class Time(BaseModel):
    """A point in time measured by both timing methods.

    Either component may be missing, e.g. game time before it has been
    initialized. A Time with both components missing marks a skipped split.

    Attributes:
        real_time: Real elapsed time.
        game_time: In-game time (real time minus loading times by default).
    """

    model_config = ConfigDict(frozen=True)

    real_time: TimeSpan | None = Field(default=None, description="Real elapsed time")
    game_time: TimeSpan | None = Field(default=None, description="In-game time")

    def get(self, method: TimingMethod) -> TimeSpan | None:
        """Get the component for a timing method."""
        if method is TimingMethod.REAL_TIME:
            return self.real_time
        return self.game_time

    def with_time(self, method: TimingMethod, value: TimeSpan | None) -> "Time":
        """Return a copy with one component replaced."""
        return self.model_copy(update={method.value: value})

    def is_empty(self) -> bool:
        return self.real_time is None and self.game_time is None
