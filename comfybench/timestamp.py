"""Measurement timestamps from the OS clock or a CPU timestamp counter."""

from __future__ import annotations

import math
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum, IntEnum

from .duration import PICOS_PER_NANO, PICOS_PER_SEC, FineDuration

_FREQUENCY_UNITS = (
    ("MHz", 1e6),
    ("GHz", 1e9),
    ("THz", 1e12),
)

_FLOAT_TEXT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

_MEASURE_TRIES = 8


class TimerKind(IntEnum):
    """Source of time used for measurements."""

    OS = 0
    TSC = 1


class TscUnavailableReason(Enum):
    """Why the CPU timestamp counter cannot be used."""

    UNIMPLEMENTED = "unimplemented"
    ZERO_FREQUENCY = "zero TSC frequency"
    MISSING_INSTRUCTIONS = "missing instructions"
    VARIABLE_FREQUENCY = "variable TSC frequency"

    def __str__(self) -> str:
        return self.value


class TscUnavailableError(RuntimeError):
    """Raised when the CPU timestamp counter cannot be used."""

    def __init__(self, reason: TscUnavailableReason) -> None:
        super().__init__(str(reason))
        self.reason = reason


@dataclass(frozen=True, order=True)
class TscTimestamp:
    """A raw reading of a CPU timestamp counter."""

    value: int

    def duration_since(self, earlier: TscTimestamp, frequency: int) -> FineDuration:
        """Time elapsed since `earlier` at `frequency` ticks per second; zero if earlier is later."""
        if frequency <= 0:
            raise ValueError("timestamp counter frequency must be positive")
        diff = self.value - earlier.value
        if diff < 0:
            return FineDuration.ZERO
        return FineDuration((diff * PICOS_PER_SEC) // frequency)


def _read_tsc() -> TscTimestamp:
    raise TscUnavailableError(TscUnavailableReason.UNIMPLEMENTED)


@dataclass(frozen=True)
class Timestamp:
    """A point in time taken from one kind of timer."""

    kind: TimerKind
    value: int | TscTimestamp

    @classmethod
    def start(cls, timer_kind: TimerKind) -> Timestamp:
        """Take a timestamp at the start of a measured section."""
        return cls._now(timer_kind)

    @classmethod
    def end(cls, timer_kind: TimerKind) -> Timestamp:
        """Take a timestamp at the end of a measured section."""
        return cls._now(timer_kind)

    @classmethod
    def _now(cls, timer_kind: TimerKind) -> Timestamp:
        kind = TimerKind(timer_kind)
        if kind is TimerKind.OS:
            return cls(kind, time.perf_counter_ns())
        return cls(kind, _read_tsc())

    def duration_since(self, earlier: Timestamp, frequency: int | None = None) -> FineDuration:
        """Time elapsed since `earlier`; a TSC timestamp needs the counter frequency."""
        if self.kind is not earlier.kind:
            raise ValueError("cannot compare timestamps from different timers")
        if self.kind is TimerKind.OS:
            if frequency is not None:
                raise ValueError("OS timestamps take no counter frequency")
            return FineDuration(max(self.value - earlier.value, 0) * PICOS_PER_NANO)
        if frequency is None:
            raise ValueError("TSC timestamps need the counter frequency")
        return self.value.duration_since(earlier.value, frequency)


def tsc_frequency() -> int:
    """Frequency of the CPU timestamp counter in ticks per second."""
    raise TscUnavailableError(TscUnavailableReason.UNIMPLEMENTED)


def nominal_frequency(cpu_name: str | bytes) -> float | None:
    """Parse the frequency in a CPU brand name such as ``... @ 2.50GHz``."""
    if isinstance(cpu_name, (bytes, bytearray)):
        raw = bytes(cpu_name).split(b"\0", 1)[0]
        try:
            name = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    else:
        name = cpu_name

    for unit, scale in _FREQUENCY_UNITS:
        unit_start = name.find(unit)
        if unit_start < 0:
            continue
        pre_unit = name[:unit_start]
        num = pre_unit.rsplit(" ", 1)[-1]
        if _FLOAT_TEXT.fullmatch(num):
            return float(num) * scale
    return None


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def choose_frequency(nominal: float | None, measured: float) -> int:
    """Prefer the nominal frequency when within 0.1% of the measured one."""
    if nominal is not None and measured * 0.999 < nominal < measured * 1.001:
        return _round_half_away(nominal)
    return _round_half_away(measured)


def measure_frequency(measure_once: Callable[[timedelta], float]) -> float:
    """Measure a frequency with growing delays until two readings agree within 0.1%."""
    delay_ms = 1
    prev_measure = -math.inf
    measures: list[float] = []

    for _ in range(_MEASURE_TRIES):
        measure = measure_once(timedelta(milliseconds=delay_ms))
        if measure * 0.999 < prev_measure < measure * 1.001:
            return measure
        measures.append(measure)
        prev_measure = measure
        delay_ms *= 2

    # No two readings agreed; take the one closest to any later reading.
    min_delta = math.inf
    result = measures[0]
    for i, first in enumerate(measures):
        for second in measures[i + 1 :]:
            delta = abs(first - second)
            if delta < min_delta:
                min_delta = delta
                result = first
    return result