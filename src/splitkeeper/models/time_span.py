"""Signed duration value used for every recorded and compared time.

A TimeSpan is zero-able: ``TimeSpan.zero()`` is a real, meaningful time.
"No time recorded" is expressed as ``None`` wherever a time is optional.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

# Absorbs accumulated floating point noise when extracting sub-second digits
EPSILON = 0.000_000_1


def _extract(seconds: float, scale: int, max_value: int) -> int:
    return min(max_value, math.floor((abs(seconds) % 1.0) * scale + EPSILON))


@dataclass(frozen=True, order=True)
class TimeSpan:
    """Signed duration with sub-second precision, stored as float seconds.

    Supports addition and subtraction with other TimeSpans, negation,
    ordering and sub-second digit extraction for formatters.

    Example:
        >>> TimeSpan.from_seconds(25) - TimeSpan.from_seconds(10)
        TimeSpan(seconds=15.0)
    """

    seconds: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "seconds", float(self.seconds))

    @classmethod
    def zero(cls) -> "TimeSpan":
        return cls(0.0)

    @classmethod
    def from_seconds(cls, seconds: float | int | Fraction) -> "TimeSpan":
        """Create a TimeSpan from (possibly rational) seconds."""
        return cls(float(seconds))

    @classmethod
    def from_milliseconds(cls, milliseconds: float | int) -> "TimeSpan":
        return cls(milliseconds / 1000.0)

    @property
    def total_seconds(self) -> float:
        return self.seconds

    @property
    def total_milliseconds(self) -> float:
        return self.seconds * 1000.0

    @property
    def tenths(self) -> int:
        """Tenths digit of the fractional part (0-9)."""
        return _extract(self.seconds, 10, 9)

    @property
    def hundredths(self) -> int:
        """Hundredths of the fractional part (0-99)."""
        return _extract(self.seconds, 100, 99)

    @property
    def milliseconds(self) -> int:
        """Milliseconds of the fractional part (0-999)."""
        return _extract(self.seconds, 1000, 999)

    def is_negative(self) -> bool:
        return self.seconds < 0

    def __add__(self, other: object) -> "TimeSpan":
        if not isinstance(other, TimeSpan):
            return NotImplemented
        return TimeSpan(self.seconds + other.seconds)

    def __sub__(self, other: object) -> "TimeSpan":
        if not isinstance(other, TimeSpan):
            return NotImplemented
        return TimeSpan(self.seconds - other.seconds)

    def __neg__(self) -> "TimeSpan":
        return TimeSpan(-self.seconds)

    def __abs__(self) -> "TimeSpan":
        return TimeSpan(abs(self.seconds))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Serialized as a plain JSON number of seconds
        from_number = core_schema.no_info_after_validator_function(
            cls.from_seconds, core_schema.float_schema(allow_inf_nan=False)
        )
        return core_schema.json_or_python_schema(
            json_schema=from_number,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_number]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.seconds
            ),
        )


def sum_times(times: Iterable[TimeSpan]) -> TimeSpan:
    """Sum a list of TimeSpans, starting from zero."""
    total = TimeSpan.zero()
    for time in times:
        total = total + time
    return total
