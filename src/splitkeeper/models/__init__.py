"""Pydantic data models for splitkeeper runs.

This package defines the data structures shared by the timer, the
comparison generators and persistence:
- Durations and dual-clock times (TimeSpan, Time, TimingMethod)
- Run structure (Run, Segment, SegmentTimes)
- Attempt history (AttemptHistoryEntry)
- Comparison names and custom definitions

All persistent models are Pydantic BaseModel subclasses, so a Run
serializes to and from JSON directly.

Example:
    >>> from splitkeeper.models import Run, Segment
    >>> run = Run(game_name="Celeste", category_name="Any%",
    ...           segments=[Segment(name="Forsaken City")])
    >>> run.model_dump_json()
"""

from .comparison import (
    BuiltinComparison,
    ComparisonDefinition,
    FixedComparison,
    Statistic,
    StatisticComparison,
)
from .lock import Lock
from .run import AttemptHistoryEntry, Run
from .segment import Segment, SegmentTimes
from .time_span import TimeSpan, sum_times
from .timing import Time, TimerPhase, TimingMethod

__all__ = [
    "AttemptHistoryEntry",
    "BuiltinComparison",
    "ComparisonDefinition",
    "FixedComparison",
    "Lock",
    "Run",
    "Segment",
    "SegmentTimes",
    "Statistic",
    "StatisticComparison",
    "Time",
    "TimeSpan",
    "TimerPhase",
    "TimingMethod",
    "sum_times",
]
