"""Segment model: one checkpoint of a run."""

from pydantic import BaseModel, Field, field_validator

from .icon import IconData
from .time_span import TimeSpan
from .timing import TimingMethod


class SegmentTimes(BaseModel):
    """Reference times of a segment for a single timing method.

    Attributes:
        split_time: Personal best split time, cumulative from the run start.
        best_segment_time: Fastest time ever recorded for this segment alone.
    """

    split_time: TimeSpan | None = Field(default=None, description="Personal best split time")
    best_segment_time: TimeSpan | None = Field(default=None, description="Best segment time")


def _default_times() -> dict[TimingMethod, SegmentTimes]:
    return {method: SegmentTimes() for method in TimingMethod}


class Segment(BaseModel):
    """A single checkpoint in a run.

    The index of a segment within its run is its identity for the duration
    of an attempt. Times are kept per timing method; both methods are
    always present in ``times``.

    Attributes:
        name: Display name of the checkpoint.
        icon: Optional icon image data (base64 encoded in JSON).
        times: Reference times keyed by timing method.

    Example:
        >>> segment = Segment(name="Forest")
        >>> segment.split_time(TimingMethod.REAL_TIME) is None
        True
    """

    name: str = Field(description="Segment name")
    icon: IconData | None = Field(default=None, description="Segment icon data")
    times: dict[TimingMethod, SegmentTimes] = Field(default_factory=_default_times)

    @field_validator("times")
    @classmethod
    def _fill_missing_methods(
        cls, times: dict[TimingMethod, SegmentTimes]
    ) -> dict[TimingMethod, SegmentTimes]:
        return {method: times.get(method, SegmentTimes()) for method in TimingMethod}

    def split_time(self, method: TimingMethod) -> TimeSpan | None:
        return self.times[method].split_time

    def best_segment_time(self, method: TimingMethod) -> TimeSpan | None:
        return self.times[method].best_segment_time

    def set_split_time(self, method: TimingMethod, value: TimeSpan | None) -> None:
        self.times[method].split_time = value

    def set_best_segment_time(self, method: TimingMethod, value: TimeSpan | None) -> None:
        self.times[method].best_segment_time = value
