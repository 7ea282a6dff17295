"""Comparison generators for splitkeeper.

A comparison turns a run's stored reference times and attempt history
into one cumulative time per segment. Built-in comparisons are a closed
set resolved through ``_BUILTIN_GENERATORS``; custom comparisons are
definitions stored on the run itself.

Ordering for cycling is always: built-ins in declaration order, then
custom comparisons in insertion order.
"""

import statistics
from collections.abc import Callable, Sequence

from ..models import (
    BuiltinComparison,
    FixedComparison,
    Run,
    Statistic,
    StatisticComparison,
    TimeSpan,
    TimingMethod,
)

ComparisonTimes = list[TimeSpan | None]


def accumulate(segment_times: Sequence[TimeSpan | None]) -> ComparisonTimes:
    """Turn per-segment times into cumulative split times.

    Once a segment has no time, it and every later split have no time.
    """
    result: ComparisonTimes = []
    total: TimeSpan | None = TimeSpan.zero()
    for segment_time in segment_times:
        if total is not None and segment_time is not None:
            total = total + segment_time
        else:
            total = None
        result.append(total)
    return result


def _segment_samples(
    run: Run, method: TimingMethod, last_n: int | None
) -> list[list[TimeSpan]]:
    """Collect recorded segment times per segment from history."""
    entries = [e for e in run.attempt_history if e.timing_method is method]
    if last_n is not None:
        entries = entries[-last_n:]
    samples: list[list[TimeSpan]] = [[] for _ in run.segments]
    for entry in entries:
        for index, segment_time in enumerate(entry.segment_times):
            if segment_time is not None:
                samples[index].append(segment_time)
    return samples


def _reduce(samples: list[TimeSpan], statistic: Statistic) -> TimeSpan | None:
    if not samples:
        return None
    seconds = [s.total_seconds for s in samples]
    if statistic is Statistic.AVERAGE:
        return TimeSpan(statistics.fmean(seconds))
    if statistic is Statistic.MEDIAN:
        return TimeSpan(statistics.median(seconds))
    if statistic is Statistic.BEST:
        return min(samples)
    return max(samples)


def _statistic_times(
    run: Run, method: TimingMethod, statistic: Statistic, last_n: int | None
) -> ComparisonTimes:
    samples = _segment_samples(run, method, last_n)
    return accumulate([_reduce(s, statistic) for s in samples])


def _personal_best(run: Run, method: TimingMethod, window: int | None) -> ComparisonTimes:
    return [segment.split_time(method) for segment in run.segments]


def _best_segments(run: Run, method: TimingMethod, window: int | None) -> ComparisonTimes:
    return accumulate([segment.best_segment_time(method) for segment in run.segments])


def _average_segments(run: Run, method: TimingMethod, window: int | None) -> ComparisonTimes:
    return _statistic_times(run, method, Statistic.AVERAGE, window)


def _median_segments(run: Run, method: TimingMethod, window: int | None) -> ComparisonTimes:
    return _statistic_times(run, method, Statistic.MEDIAN, window)


def _worst_segments(run: Run, method: TimingMethod, window: int | None) -> ComparisonTimes:
    return _statistic_times(run, method, Statistic.WORST, window)


def _latest_run(run: Run, method: TimingMethod, window: int | None) -> ComparisonTimes:
    for entry in reversed(run.attempt_history):
        if entry.timing_method is method:
            return accumulate(entry.segment_times)
    return [None] * len(run.segments)


_BUILTIN_GENERATORS: dict[
    BuiltinComparison, Callable[[Run, TimingMethod, int | None], ComparisonTimes]
] = {
    BuiltinComparison.PERSONAL_BEST: _personal_best,
    BuiltinComparison.BEST_SEGMENTS: _best_segments,
    BuiltinComparison.AVERAGE_SEGMENTS: _average_segments,
    BuiltinComparison.MEDIAN_SEGMENTS: _median_segments,
    BuiltinComparison.WORST_SEGMENTS: _worst_segments,
    BuiltinComparison.LATEST_RUN: _latest_run,
}


def available_comparisons(run: Run) -> list[str]:
    """All comparison names selectable for a run, in cycling order."""
    return run.comparison_names()


def resolve_comparison(run: Run, name: str) -> str:
    """Return name if the run offers it, otherwise Personal Best."""
    if name in available_comparisons(run):
        return name
    return BuiltinComparison.PERSONAL_BEST.value


def next_comparison(run: Run, current: str) -> str:
    """Comparison after current, wrapping to the first."""
    names = available_comparisons(run)
    index = names.index(resolve_comparison(run, current))
    return names[(index + 1) % len(names)]


def previous_comparison(run: Run, current: str) -> str:
    """Comparison before current, wrapping to the last."""
    names = available_comparisons(run)
    index = names.index(resolve_comparison(run, current))
    return names[(index - 1) % len(names)]


def generate_comparison(
    run: Run,
    name: str,
    method: TimingMethod,
    history_window: int | None = None,
) -> ComparisonTimes:
    """Generate cumulative comparison times for every segment.

    Args:
        run: Run to derive times from
        name: Comparison name; unknown names fall back to Personal Best
        method: Timing method to generate times for
        history_window: Limit history-based built-ins to the last N attempts

    Returns:
        One optional cumulative time per segment
    """
    name = resolve_comparison(run, name)
    definition = run.custom_comparisons.get(name)

    if definition is None:
        generator = _BUILTIN_GENERATORS[BuiltinComparison(name)]
        return generator(run, method, history_window)

    if isinstance(definition, FixedComparison):
        times = list(definition.split_times.get(method, []))
        # Pad or truncate to the current segment count
        times = times[: len(run.segments)]
        return times + [None] * (len(run.segments) - len(times))

    assert isinstance(definition, StatisticComparison)
    return _statistic_times(run, method, definition.statistic, definition.last_n)
