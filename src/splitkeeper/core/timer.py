"""Attempt timer: the state machine driving a run.

The timer exclusively owns one Run. External callers issue commands
(start, split, skip_split, undo_split, pause, reset, timing method and
comparison switches) in any order. Commands that are invalid for the
current phase are no-ops: they neither raise nor change state.

Both timing methods are tracked for every split. Game time follows real
time minus loading times unless it is paused at a fixed value, and is
missing entirely until initialized.
"""

import logging
from datetime import datetime

from ..config import SplitkeeperConfig
from ..models import (
    AttemptHistoryEntry,
    BuiltinComparison,
    Run,
    Time,
    TimerPhase,
    TimeSpan,
    TimingMethod,
)
from . import comparisons, run_io
from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class AttemptTimer:
    """State machine for timed attempts over a run's segments.

    Example:
        >>> timer = AttemptTimer(run, clock)
        >>> timer.start()
        >>> clock.advance(10)
        >>> timer.split()
        >>> timer.current_split_index
        1
    """

    def __init__(
        self,
        run: Run,
        clock: Clock | None = None,
        *,
        timing_method: TimingMethod = TimingMethod.REAL_TIME,
        comparison: str = BuiltinComparison.PERSONAL_BEST.value,
        history_window: int | None = None,
    ) -> None:
        self._run = run
        self._clock: Clock = clock or SystemClock()
        self._timing_method = timing_method
        self._comparison = comparisons.resolve_comparison(run, comparison)
        self._history_window = history_window

        self._phase = TimerPhase.NOT_STARTED
        self._current_split_index = 0
        self._live_split_times: list[Time | None] = [None] * len(run.segments)
        self._attempt_index: int | None = None
        self._start: TimeSpan | None = None
        self._attempt_started_at: datetime | None = None
        self._attempt_ended_at: datetime | None = None
        self._pause_started: TimeSpan | None = None
        self._accumulated_pause = TimeSpan.zero()

        self._game_time_initialized = False
        self._game_time_paused = False
        self._game_time_pause_time: TimeSpan | None = None
        self._loading_times = TimeSpan.zero()

    @classmethod
    def from_config(
        cls, run: Run, config: SplitkeeperConfig, clock: Clock | None = None
    ) -> "AttemptTimer":
        """Create a timer using the configured defaults."""
        return cls(
            run,
            clock,
            timing_method=config.timer.timing_method,
            comparison=config.timer.comparison,
            history_window=config.comparisons.history_window,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_phase(self) -> TimerPhase:
        return self._phase

    @property
    def current_timing_method(self) -> TimingMethod:
        return self._timing_method

    @property
    def current_comparison(self) -> str:
        """Active comparison name; Personal Best if the name was removed."""
        self._comparison = comparisons.resolve_comparison(self._run, self._comparison)
        return self._comparison

    @property
    def current_split_index(self) -> int:
        return self._current_split_index

    @property
    def run(self) -> Run:
        """The owned run. Callers must treat it as read-only."""
        return self._run

    @property
    def attempt_started_at(self) -> datetime | None:
        return self._attempt_started_at

    @property
    def attempt_ended_at(self) -> datetime | None:
        return self._attempt_ended_at

    @property
    def accumulated_pause_duration(self) -> TimeSpan:
        return self._accumulated_pause

    @property
    def live_split_times(self) -> list[Time | None]:
        """Recorded split times of the attempt in progress.

        None means the segment has not been reached; an empty Time means
        the split was skipped.
        """
        return list(self._live_split_times)

    @property
    def is_game_time_initialized(self) -> bool:
        return self._game_time_initialized

    @property
    def is_game_time_paused(self) -> bool:
        return self._game_time_paused

    @property
    def loading_times(self) -> TimeSpan:
        return self._loading_times

    def is_skipped(self, index: int) -> bool:
        """Whether the split at index was explicitly skipped."""
        split = self._live_split_times[index]
        return split is not None and split.is_empty()

    def clone_run(self) -> Run:
        """Independent deep copy of the owned run."""
        return self._run.model_copy(deep=True)

    def export_run(self) -> str:
        """The owned run in the interchange format."""
        return run_io.export_run(self._run)

    def current_time(self) -> Time:
        """Current attempt time under both timing methods."""
        if self._phase is TimerPhase.ENDED:
            final = self._live_split_times[-1]
            assert final is not None
            return final
        real_time = self._real_time()
        return Time(real_time=real_time, game_time=self._game_time(real_time))

    def _real_time(self) -> TimeSpan:
        if self._phase is TimerPhase.NOT_STARTED or self._start is None:
            return TimeSpan.zero()
        now = self._pause_started if self._pause_started is not None else self._clock.now()
        return now - self._start - self._accumulated_pause

    def _game_time(self, real_time: TimeSpan) -> TimeSpan | None:
        if not self._game_time_initialized:
            return None
        if self._game_time_paused:
            return self._game_time_pause_time
        return real_time - self._loading_times

    def comparison_times(self) -> list[TimeSpan | None]:
        """Active comparison's cumulative times under the active method."""
        return comparisons.generate_comparison(
            self._run, self.current_comparison, self._timing_method, self._history_window
        )

    def delta(self, index: int) -> TimeSpan | None:
        """Recorded split time at index minus the active comparison time."""
        split = self._live_split_times[index]
        if split is None:
            return None
        split_time = split.get(self._timing_method)
        comparison_time = self.comparison_times()[index]
        if split_time is None or comparison_time is None:
            return None
        return split_time - comparison_time

    def live_delta(self) -> TimeSpan | None:
        """Running time minus the comparison time of the current split."""
        if self._phase not in (TimerPhase.RUNNING, TimerPhase.PAUSED):
            return None
        now = self.current_time().get(self._timing_method)
        comparison_time = self.comparison_times()[self._current_split_index]
        if now is None or comparison_time is None:
            return None
        return now - comparison_time

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin a new attempt."""
        if self._phase is not TimerPhase.NOT_STARTED:
            logger.debug("Ignoring start in phase %s", self._phase.value)
            return
        if not self._run.segments:
            logger.debug("Ignoring start: run has no segments")
            return

        self._phase = TimerPhase.RUNNING
        self._start = self._clock.now()
        self._attempt_started_at = self._clock.wall()
        self._attempt_ended_at = None
        self._attempt_index = self._run.next_attempt_index()
        self._current_split_index = 0
        self._live_split_times = [None] * len(self._run.segments)
        self._pause_started = None
        self._accumulated_pause = TimeSpan.zero()
        logger.info("Started attempt %d", self._attempt_index)

    def split(self) -> None:
        """Record the current time for the current segment and advance."""
        if self._phase is not TimerPhase.RUNNING:
            logger.debug("Ignoring split in phase %s", self._phase.value)
            return

        index = self._current_split_index
        self._live_split_times[index] = self.current_time()
        self._current_split_index += 1

        if self._current_split_index == len(self._live_split_times):
            self._phase = TimerPhase.ENDED
            self._attempt_ended_at = self._clock.wall()
            logger.info("Attempt %s ended", self._attempt_index)

    def skip_split(self) -> None:
        """Advance past the current segment without recording a time.

        The last segment cannot be skipped.
        """
        if self._phase is not TimerPhase.RUNNING:
            logger.debug("Ignoring skip in phase %s", self._phase.value)
            return
        if self._current_split_index >= len(self._live_split_times) - 1:
            logger.debug("Ignoring skip on the final segment")
            return

        self._live_split_times[self._current_split_index] = Time()
        self._current_split_index += 1

    def undo_split(self) -> None:
        """Step back one split, clearing its recorded time."""
        if self._phase not in (TimerPhase.RUNNING, TimerPhase.ENDED):
            logger.debug("Ignoring undo in phase %s", self._phase.value)
            return
        if self._current_split_index == 0:
            return

        if self._phase is TimerPhase.ENDED:
            self._phase = TimerPhase.RUNNING
            self._attempt_ended_at = None
        self._current_split_index -= 1
        self._live_split_times[self._current_split_index] = None

    def pause(self) -> None:
        """Pause a running attempt, or resume a paused one."""
        if self._phase is TimerPhase.RUNNING:
            self._pause_started = self._clock.now()
            self._phase = TimerPhase.PAUSED
        elif self._phase is TimerPhase.PAUSED:
            self._finish_pause()
            self._phase = TimerPhase.RUNNING
        else:
            logger.debug("Ignoring pause in phase %s", self._phase.value)

    def resume(self) -> None:
        """Resume a paused attempt."""
        if self._phase is TimerPhase.PAUSED:
            self.pause()

    def split_or_start(self) -> None:
        """Start when not started, otherwise split."""
        if self._phase is TimerPhase.NOT_STARTED:
            self.start()
        else:
            self.split()

    def _finish_pause(self) -> None:
        if self._pause_started is not None:
            self._accumulated_pause = (
                self._accumulated_pause + self._clock.now() - self._pause_started
            )
            self._pause_started = None

    def reset(self, update_splits: bool = True) -> None:
        """End the attempt and return to NotStarted.

        Args:
            update_splits: Commit the attempt to history and update best
                times. False discards it as a practice attempt.
        """
        if self._phase is TimerPhase.NOT_STARTED:
            logger.debug("Ignoring reset: no attempt in progress")
            return

        self._finish_pause()
        if update_splits:
            self._commit_attempt()
        else:
            logger.info("Discarded attempt %s", self._attempt_index)

        self._phase = TimerPhase.NOT_STARTED
        self._current_split_index = 0
        self._live_split_times = [None] * len(self._run.segments)
        self._attempt_index = None
        self._start = None
        self._attempt_started_at = None
        self._attempt_ended_at = None
        self._accumulated_pause = TimeSpan.zero()
        self._game_time_paused = False
        self._game_time_pause_time = None
        self._loading_times = TimeSpan.zero()

    def switch_timing_method(self) -> None:
        """Toggle between real time and game time."""
        self._timing_method = self._timing_method.other()

    def set_current_timing_method(self, method: TimingMethod) -> None:
        self._timing_method = method

    def switch_to_next_comparison(self) -> None:
        self._comparison = comparisons.next_comparison(self._run, self._comparison)

    def switch_to_previous_comparison(self) -> None:
        self._comparison = comparisons.previous_comparison(self._run, self._comparison)

    def set_current_comparison(self, name: str) -> bool:
        """Select a comparison by name.

        Returns:
            False (leaving the selection unchanged) if the run has no such
            comparison.
        """
        if name not in comparisons.available_comparisons(self._run):
            return False
        self._comparison = name
        return True

    # ------------------------------------------------------------------
    # Game time
    # ------------------------------------------------------------------

    def initialize_game_time(self) -> None:
        self._game_time_initialized = True

    def deinitialize_game_time(self) -> None:
        self._game_time_initialized = False

    def pause_game_time(self) -> None:
        """Freeze game time at its current value."""
        if self._game_time_paused:
            return
        self._game_time_pause_time = self.current_time().game_time
        self._game_time_paused = True

    def resume_game_time(self) -> None:
        """Let game time follow real time again, counting the gap as loading."""
        if not self._game_time_paused:
            return
        real_time = self._real_time()
        if self._game_time_pause_time is not None:
            self._loading_times = real_time - self._game_time_pause_time
        self._game_time_paused = False
        self._game_time_pause_time = None

    def set_game_time(self, game_time: TimeSpan) -> None:
        """Set game time directly, e.g. from a game-reported clock."""
        if self._game_time_paused:
            self._game_time_pause_time = game_time
        self._loading_times = self._real_time() - game_time

    def set_loading_times(self, loading_times: TimeSpan) -> None:
        self._loading_times = loading_times
        if self._game_time_paused:
            self._game_time_pause_time = self._real_time() - loading_times

    # ------------------------------------------------------------------
    # Committing attempts
    # ------------------------------------------------------------------

    def _segment_times(self, method: TimingMethod) -> list[TimeSpan | None]:
        """Per-segment durations of the live attempt for a method.

        A segment only gets a time when its own split and the previous one
        were both recorded.
        """
        result: list[TimeSpan | None] = []
        previous: TimeSpan | None = TimeSpan.zero()
        for split in self._live_split_times:
            split_time = split.get(method) if split is not None else None
            if split_time is not None and previous is not None:
                result.append(split_time - previous)
            else:
                result.append(None)
            previous = split_time
        return result

    def _split_times(self, method: TimingMethod) -> list[TimeSpan | None]:
        return [s.get(method) if s is not None else None for s in self._live_split_times]

    def _commit_attempt(self) -> None:
        ended = self._phase is TimerPhase.ENDED

        for method in TimingMethod:
            for index, segment_time in enumerate(self._segment_times(method)):
                if segment_time is not None and self._run.update_segment_best(
                    index, method, segment_time
                ):
                    logger.debug(
                        "New best segment %d (%s): %.3fs",
                        index,
                        method.value,
                        segment_time.total_seconds,
                    )

        if ended:
            self._update_personal_best()

        assert self._attempt_index is not None
        assert self._attempt_started_at is not None
        entry = AttemptHistoryEntry(
            index=self._attempt_index,
            started=self._attempt_started_at,
            ended=self._attempt_ended_at if ended else None,
            timing_method=self._timing_method,
            segment_times=tuple(self._segment_times(self._timing_method)),
            pause_time=self._accumulated_pause if self._accumulated_pause.seconds else None,
        )
        self._run.append_history(entry)
        logger.info("Recorded attempt %d", entry.index)

    def _update_personal_best(self) -> None:
        method = self._timing_method
        final_time = self._split_times(method)[-1]
        personal_best = self._run.personal_best_time(method)
        if final_time is None:
            return
        if personal_best is not None and not final_time < personal_best:
            return

        for other in TimingMethod:
            split_times = self._split_times(other)
            if other is method or split_times[-1] is not None:
                self._run.commit_personal_best(split_times, other)
        logger.info("New personal best: %.3fs", final_time.total_seconds)
