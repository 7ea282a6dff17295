"""Time formatters turning optional TimeSpans into display strings.

Every formatter is a pure function of its input: it holds configuration
(accuracy, decimal dropping) but no state.

Example:
    >>> SegmentTime().format(TimeSpan.from_seconds(-(4 * 60 + 23.5)))
    '−4:23.50'
"""

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import NamedTuple

from .models import TimeSpan

# The dash symbol used for "no time"
DASH = "—"
# The minus symbol for negative numbers
MINUS = "−"
# ASCII minus, for contexts that cannot render MINUS
ASCII_MINUS = "-"
PLUS = "+"

_COMPLETE_FRACTION_DIGITS = 7


class Accuracy(str, Enum):
    """How many sub-second digits to show."""

    SECONDS = "seconds"
    TENTHS = "tenths"
    HUNDREDTHS = "hundredths"
    MILLISECONDS = "milliseconds"

    def format_fraction(self, time: TimeSpan) -> str:
        if self is Accuracy.TENTHS:
            return f".{time.tenths}"
        if self is Accuracy.HUNDREDTHS:
            return f".{time.hundredths:02}"
        if self is Accuracy.MILLISECONDS:
            return f".{time.milliseconds:03}"
        return ""


class _Parts(NamedTuple):
    negative: bool
    days: int
    hours: int
    minutes: int
    seconds: int


def _split(time: TimeSpan) -> _Parts:
    total = abs(time.total_seconds)
    whole = math.floor(total)
    days, rest = divmod(whole, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return _Parts(time.is_negative(), days, hours, minutes, seconds)


def _compact(parts: _Parts, fraction: str) -> str:
    hours = parts.days * 24 + parts.hours
    if hours:
        return f"{hours}:{parts.minutes:02}:{parts.seconds:02}{fraction}"
    if parts.minutes:
        return f"{parts.minutes}:{parts.seconds:02}{fraction}"
    return f"{parts.seconds}{fraction}"


class TimeFormatter(ABC):
    """Formats an optional TimeSpan."""

    @abstractmethod
    def format(self, time: TimeSpan | None) -> str:
        """Format time, or the formatter's placeholder when None."""

    def __call__(self, time: TimeSpan | None) -> str:
        return self.format(time)


class Regular(TimeFormatter):
    """Timer-style display that always shows minutes, e.g. ``0:05.23``."""

    def __init__(self, accuracy: Accuracy = Accuracy.HUNDREDTHS) -> None:
        self.accuracy = accuracy

    def format(self, time: TimeSpan | None) -> str:
        if time is None:
            return DASH
        parts = _split(time)
        sign = MINUS if parts.negative else ""
        fraction = self.accuracy.format_fraction(time)
        hours = parts.days * 24 + parts.hours
        if hours:
            return f"{sign}{hours}:{parts.minutes:02}:{parts.seconds:02}{fraction}"
        return f"{sign}{parts.minutes}:{parts.seconds:02}{fraction}"


class SegmentTime(TimeFormatter):
    """Compact segment duration, e.g. ``23.50`` or ``4:23.50``."""

    def __init__(self, accuracy: Accuracy = Accuracy.HUNDREDTHS) -> None:
        self.accuracy = accuracy

    def format(self, time: TimeSpan | None) -> str:
        if time is None:
            return DASH
        parts = _split(time)
        sign = MINUS if parts.negative else ""
        return sign + _compact(parts, self.accuracy.format_fraction(time))


class Delta(TimeFormatter):
    """Signed difference to a comparison, e.g. ``+1.2`` or ``−1:05``.

    Decimals are dropped once the delta reaches a minute unless
    drop_decimals is False.
    """

    def __init__(self, drop_decimals: bool = True, accuracy: Accuracy = Accuracy.TENTHS) -> None:
        self.drop_decimals = drop_decimals
        self.accuracy = accuracy

    def format(self, time: TimeSpan | None) -> str:
        if time is None:
            return DASH
        parts = _split(time)
        sign = MINUS if parts.negative else PLUS
        if self.drop_decimals and abs(time.total_seconds) >= 60:
            fraction = ""
        else:
            fraction = self.accuracy.format_fraction(time)
        return sign + _compact(parts, fraction)


class Days(TimeFormatter):
    """Like Regular, but rolls 24 hours over into days, e.g. ``2d 3:04:05``."""

    def __init__(self, accuracy: Accuracy = Accuracy.HUNDREDTHS) -> None:
        self.accuracy = accuracy

    def format(self, time: TimeSpan | None) -> str:
        if time is None:
            return DASH
        parts = _split(time)
        if not parts.days:
            return Regular(self.accuracy).format(time)
        sign = MINUS if parts.negative else ""
        fraction = self.accuracy.format_fraction(time)
        return (
            f"{sign}{parts.days}d {parts.hours}:{parts.minutes:02}:{parts.seconds:02}{fraction}"
        )


class Complete(TimeFormatter):
    """Lossless fixed-width display, e.g. ``01:02:03.4500000``.

    None formats as zero.
    """

    def format(self, time: TimeSpan | None) -> str:
        if time is None:
            time = TimeSpan.zero()
        parts = _split(time)
        scale = 10**_COMPLETE_FRACTION_DIGITS
        fraction = min(
            scale - 1,
            math.floor((abs(time.total_seconds) % 1.0) * scale + 0.000_000_1),
        )
        sign = MINUS if parts.negative else ""
        hours = parts.days * 24 + parts.hours
        return f"{sign}{hours:02}:{parts.minutes:02}:{parts.seconds:02}.{fraction:07}"


FORMATTERS: dict[str, type[TimeFormatter]] = {
    "regular": Regular,
    "segment": SegmentTime,
    "delta": Delta,
    "days": Days,
    "complete": Complete,
}


def get_formatter(style: str, accuracy: Accuracy | None = None) -> TimeFormatter:
    """Build a formatter by style name.

    Raises:
        KeyError: If the style is unknown
    """
    formatter_cls = FORMATTERS[style]
    if accuracy is None or formatter_cls is Complete:
        return formatter_cls()
    if formatter_cls is Delta:
        return Delta(accuracy=accuracy)
    return formatter_cls(accuracy)  # type: ignore[call-arg]
