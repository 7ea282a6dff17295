"""Comparison names and custom comparison definitions.

Built-in comparisons form a closed set (``BuiltinComparison``). Runs may
additionally carry named custom comparisons, stored as one of the
definition variants below and discriminated by ``kind``.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from .time_span import TimeSpan
from .timing import TimingMethod


class BuiltinComparison(str, Enum):
    """Built-in comparisons, in cycling order."""

    PERSONAL_BEST = "Personal Best"
    BEST_SEGMENTS = "Best Segments"
    AVERAGE_SEGMENTS = "Average Segments"
    MEDIAN_SEGMENTS = "Median Segments"
    WORST_SEGMENTS = "Worst Segments"
    LATEST_RUN = "Latest Run"


class Statistic(str, Enum):
    """Per-segment statistic over attempt history."""

    AVERAGE = "average"
    MEDIAN = "median"
    BEST = "best"
    WORST = "worst"


class FixedComparison(BaseModel):
    """Explicit cumulative split times, e.g. imported from a rival's run.

    Attributes:
        split_times: Cumulative times per segment, keyed by timing method.
            Missing methods compare as no time.
    """

    kind: Literal["fixed"] = "fixed"
    split_times: dict[TimingMethod, list[TimeSpan | None]] = Field(default_factory=dict)


class StatisticComparison(BaseModel):
    """Statistic over the run's attempt history.

    Attributes:
        statistic: Which per-segment statistic to take.
        last_n: Only consider the most recent N matching attempts.
    """

    kind: Literal["statistic"] = "statistic"
    statistic: Statistic = Field(description="Per-segment statistic")
    last_n: int | None = Field(default=None, ge=1, description="History window")


ComparisonDefinition = Annotated[
    FixedComparison | StatisticComparison, Field(discriminator="kind")
]
