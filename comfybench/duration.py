"""Picosecond-precise durations and their human-readable display."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum

from .fmt import format_f64

U128_MAX = (1 << 128) - 1

PICOS_PER_NANO = 1_000
PICOS_PER_MICRO = 1_000 * PICOS_PER_NANO
PICOS_PER_MILLI = 1_000 * PICOS_PER_MICRO
PICOS_PER_SEC = 1_000 * PICOS_PER_MILLI
PICOS_PER_MIN = 60 * PICOS_PER_SEC
PICOS_PER_HOUR = 60 * PICOS_PER_MIN
PICOS_PER_DAY = 24 * PICOS_PER_HOUR

_DEFAULT_SIG_FIGS = 4

_FORMAT_SPEC = re.compile(
    r"(?:(?P<fill>.)?(?P<align>[<>^]))?(?P<width>\d+)?(?:\.(?P<precision>\d+))?",
    re.DOTALL,
)


class TimeScale(IntEnum):
    """Unit of time used to display a duration."""

    PICO_SEC = 0
    NANO_SEC = 1
    MICRO_SEC = 2
    MILLI_SEC = 3
    SEC = 4
    MIN = 5
    HOUR = 6
    DAY = 7

    @classmethod
    def from_picos(cls, picos: int) -> TimeScale:
        """Pick the scale for displaying `picos` picoseconds."""
        for scale in reversed(cls):
            if picos >= scale.picos:
                return scale
        return cls.PICO_SEC

    @property
    def picos(self) -> int:
        """Number of picoseconds in one unit of this scale."""
        return _SCALE_PICOS[self]

    def suffix(self) -> str:
        """Unit suffix for this scale."""
        return _SCALE_SUFFIXES[self]


_SCALE_PICOS = {
    TimeScale.PICO_SEC: 1,
    TimeScale.NANO_SEC: PICOS_PER_NANO,
    TimeScale.MICRO_SEC: PICOS_PER_MICRO,
    TimeScale.MILLI_SEC: PICOS_PER_MILLI,
    TimeScale.SEC: PICOS_PER_SEC,
    TimeScale.MIN: PICOS_PER_MIN,
    TimeScale.HOUR: PICOS_PER_HOUR,
    TimeScale.DAY: PICOS_PER_DAY,
}

_SCALE_SUFFIXES = {
    TimeScale.PICO_SEC: "ps",
    TimeScale.NANO_SEC: "ns",
    TimeScale.MICRO_SEC: "µs",
    TimeScale.MILLI_SEC: "ms",
    TimeScale.SEC: "s",
    TimeScale.MIN: "m",
    TimeScale.HOUR: "h",
    TimeScale.DAY: "d",
}


@dataclass(frozen=True, order=True)
class FineDuration:
    """A non-negative duration measured in whole picoseconds."""

    picos: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.picos, bool) or not isinstance(self.picos, int):
            raise TypeError(f"picoseconds must be an int, not {type(self.picos).__name__}")
        if self.picos < 0:
            raise ValueError("a duration cannot be negative")
        if self.picos > U128_MAX:
            raise OverflowError("duration is too large to represent")

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> FineDuration:
        """Convert a non-negative ``timedelta``."""
        if delta < timedelta(0):
            raise ValueError(f"{delta!r} is negative")
        micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        picos = micros * PICOS_PER_MICRO
        if picos > U128_MAX:
            raise OverflowError(f"{delta!r} is too large to fit in a FineDuration")
        return cls(picos)

    def is_zero(self) -> bool:
        """Return True for a zero-length duration."""
        return self.picos == 0

    def clamp_to(self, other: FineDuration) -> FineDuration:
        """Return `other` if this duration is zero, else this one."""
        return other if self.is_zero() else self

    def clamp_to_min(self, other: FineDuration) -> FineDuration:
        """Return the smaller non-zero of the two durations."""
        if self.is_zero():
            return other
        if other.is_zero():
            return self
        return min(self, other)

    def format(self, sig_figs: int = _DEFAULT_SIG_FIGS, width: int | None = None) -> str:
        """Display with `sig_figs` significant characters, left-aligned to `width`."""
        return self._render(sig_figs, width, " ", None)

    def _render(self, sig_figs: int, width: int | None, fill: str, align: str | None) -> str:
        picos = self.picos
        scale = TimeScale.from_picos(picos)

        # Sub-nanosecond values read better next to nanosecond-scale values.
        if scale is TimeScale.PICO_SEC and sig_figs > 3:
            scale = TimeScale.NANO_SEC

        multiple = min(10**sig_figs, U128_MAX)
        int_day = PICOS_PER_DAY * multiple

        if int_day <= U128_MAX and picos >= int_day:
            text = str(picos // PICOS_PER_DAY)
        else:
            val = float((picos * multiple) // scale.picos) / float(multiple)
            text = format_f64(val, sig_figs)

        text = f"{text} {scale.suffix()}"

        if width is not None:
            fill_len = width - len(text.encode("utf-8"))
            if fill_len >= 0:
                if align not in (None, "<"):
                    raise ValueError("durations can only be left-aligned")
                text += fill * fill_len
        return text

    def __format__(self, spec: str) -> str:
        match = _FORMAT_SPEC.fullmatch(spec)
        if match is None:
            raise ValueError(f"invalid format specification {spec!r} for FineDuration")
        precision = match["precision"]
        width = match["width"]
        return self._render(
            int(precision) if precision is not None else _DEFAULT_SIG_FIGS,
            int(width) if width is not None else None,
            match["fill"] or " ",
            match["align"],
        )

    def __str__(self) -> str:
        return self.format()

    def __add__(self, other: FineDuration) -> FineDuration:
        if not isinstance(other, FineDuration):
            return NotImplemented
        return FineDuration(self.picos + other.picos)

    def __floordiv__(self, count: int) -> FineDuration:
        if isinstance(count, bool) or not isinstance(count, int):
            return NotImplemented
        return FineDuration(self.picos // count)


FineDuration.ZERO = FineDuration(0)
FineDuration.MAX = FineDuration(U128_MAX)


def into_duration(value: timedelta | int | float) -> timedelta:
    """Accept a ``timedelta`` or a number of seconds and return a ``timedelta``."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise TypeError("cannot convert a bool into a duration")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"duration of {value} seconds is negative")
        return timedelta(seconds=value)
    if isinstance(value, float):
        if math.isnan(value) or value < 0:
            raise ValueError(f"duration of {value} seconds is not a valid duration")
        if math.isinf(value):
            raise OverflowError("duration of infinite seconds is too large")
        return timedelta(seconds=value)
    raise TypeError(f"cannot convert {type(value).__name__} into a duration")