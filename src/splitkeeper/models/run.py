"""Run and attempt history models.

A Run is the durable record: ordered segments with their reference times,
the attempt counter, every committed attempt and any custom comparisons.
Mutation entry points are only called by the attempt timer, which checks
all preconditions before calling in.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .comparison import BuiltinComparison, ComparisonDefinition
from .icon import IconData
from .segment import Segment
from .time_span import TimeSpan, sum_times
from .timing import TimingMethod


class AttemptHistoryEntry(BaseModel):
    """One finished or abandoned attempt, immutable once recorded.

    Attributes:
        index: 1-based attempt number.
        started: Wall clock time the attempt started.
        ended: Wall clock time the attempt finished (None if abandoned).
        timing_method: Timing method the segment times were recorded with.
        segment_times: Per-segment durations; None for skipped or unreached.
        pause_time: Total paused time during the attempt.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1, description="Attempt number")
    started: datetime = Field(description="Attempt start time")
    ended: datetime | None = Field(default=None, description="Attempt end time")
    timing_method: TimingMethod = Field(default=TimingMethod.REAL_TIME)
    segment_times: tuple[TimeSpan | None, ...] = Field(default=())
    pause_time: TimeSpan | None = Field(default=None, description="Total paused time")

    @property
    def completed(self) -> bool:
        return self.ended is not None

    @property
    def total_time(self) -> TimeSpan | None:
        """Sum of all segment times, or None if any segment has no time."""
        if not self.segment_times or any(t is None for t in self.segment_times):
            return None
        return sum_times(t for t in self.segment_times if t is not None)


class Run(BaseModel):
    """The durable record of an activity and its history.

    Attributes:
        game_name: Name of the game or activity.
        category_name: Name of the category being run.
        region: Optional region annotation.
        platform: Optional platform annotation.
        variables: Subcategory annotations (variable name to value).
        game_icon: Optional game icon data.
        segments: Ordered checkpoints; order never changes during an attempt.
        attempt_count: Number of committed attempts.
        attempt_history: Every committed attempt, oldest first.
        custom_comparisons: Named custom comparisons in insertion order.
    """

    game_name: str = Field(default="", description="Game name")
    category_name: str = Field(default="", description="Category name")
    region: str = Field(default="", description="Region annotation")
    platform: str = Field(default="", description="Platform annotation")
    variables: dict[str, str] = Field(default_factory=dict, description="Subcategory variables")
    game_icon: IconData | None = Field(default=None, description="Game icon data")
    segments: list[Segment] = Field(default_factory=list)
    attempt_count: int = Field(default=0, ge=0, description="Committed attempt count")
    attempt_history: list[AttemptHistoryEntry] = Field(default_factory=list)
    custom_comparisons: dict[str, ComparisonDefinition] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_consistency(self) -> "Run":
        for entry in self.attempt_history:
            if len(entry.segment_times) != len(self.segments):
                raise ValueError(
                    f"Attempt {entry.index} has {len(entry.segment_times)} segment times, "
                    f"expected {len(self.segments)}"
                )
        if self.attempt_count < len(self.attempt_history):
            raise ValueError("attempt_count is smaller than the attempt history")
        builtins = {c.value for c in BuiltinComparison}
        clashes = builtins.intersection(self.custom_comparisons)
        if clashes:
            raise ValueError(f"Custom comparisons shadow built-ins: {sorted(clashes)}")
        return self

    def personal_best_time(self, method: TimingMethod) -> TimeSpan | None:
        """Final split time of the personal best, if any."""
        if not self.segments:
            return None
        return self.segments[-1].split_time(method)

    def next_attempt_index(self) -> int:
        return self.attempt_count + 1

    def comparison_names(self) -> list[str]:
        """Built-in comparison names followed by custom ones."""
        return [c.value for c in BuiltinComparison] + list(self.custom_comparisons)

    def extended_category_name(
        self,
        show_region: bool = False,
        show_platform: bool = False,
        show_variables: bool = True,
    ) -> str:
        """Category name with optional annotations in parentheses.

        Example:
            "Any%" with variables {"Glitches": "No Major Glitches"} becomes
            "Any% (No Major Glitches)".
        """
        extras: list[str] = []
        if show_variables:
            extras.extend(value for value in self.variables.values() if value)
        if show_region and self.region:
            extras.append(self.region)
        if show_platform and self.platform:
            extras.append(self.platform)

        name = self.category_name
        if not extras:
            return name
        joined = ", ".join(extras)
        # Merge into an existing trailing parenthesis instead of opening another
        if name.endswith(")") and "(" in name:
            return f"{name[:-1]}, {joined})"
        if not name:
            return joined
        return f"{name} ({joined})"

    def set_game_icon(self, data: bytes | None) -> None:
        self.game_icon = data or None

    # Mutation entry points used by the attempt timer

    def update_segment_best(self, index: int, method: TimingMethod, new_time: TimeSpan) -> bool:
        """Store a new best segment time if it beats the current one.

        Returns:
            True if the stored best segment time changed.
        """
        segment = self.segments[index]
        current = segment.best_segment_time(method)
        if current is None or new_time < current:
            segment.set_best_segment_time(method, new_time)
            return True
        return False

    def commit_personal_best(
        self, split_times: list[TimeSpan | None], method: TimingMethod
    ) -> None:
        """Replace every segment's split time for a method.

        Args:
            split_times: Cumulative split times, one per segment
            method: Timing method the times belong to
        """
        for segment, split_time in zip(self.segments, split_times, strict=True):
            segment.set_split_time(method, split_time)

    def append_history(self, entry: AttemptHistoryEntry) -> None:
        """Append a committed attempt and count it."""
        self.attempt_history.append(entry)
        self.attempt_count += 1

    # Custom comparisons

    def add_custom_comparison(self, name: str, definition: ComparisonDefinition) -> None:
        """Register a custom comparison.

        Raises:
            ValueError: If the name is empty, built-in or already taken
        """
        if not name:
            raise ValueError("Comparison name must not be empty")
        if name in self.comparison_names():
            raise ValueError(f"Comparison already exists: {name}")
        self.custom_comparisons[name] = definition

    def remove_custom_comparison(self, name: str) -> None:
        """Remove a custom comparison.

        Raises:
            KeyError: If no custom comparison has that name
        """
        del self.custom_comparisons[name]
