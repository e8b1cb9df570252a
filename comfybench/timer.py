"""Timers and the overheads they add to measurements."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from .duration import U128_MAX, FineDuration
from .timestamp import Timestamp, TimerKind, TscUnavailableError, tsc_frequency

_PRECISION_SAMPLES = 100
_PRECISION_SEEN_THRESHOLD = 100
_PRECISION_MAX_DELAY = 100

_LOOP_SAMPLE_COUNT = 100
_LOOP_SAMPLE_SIZE = 10_000

_cache_lock = threading.Lock()
_precision_cache: dict[TimerKind, FineDuration] = {}
_loop_overhead_cache: dict[TimerKind, FineDuration] = {}
_overheads_cache: dict[TimerKind, TimedOverhead] = {}


@dataclass(frozen=True)
class TimedOverhead:
    """Measured per-operation overheads of the benchmarking machinery."""

    sample_loop: FineDuration = field(default_factory=lambda: FineDuration.ZERO)
    tally_alloc: FineDuration = field(default_factory=lambda: FineDuration.ZERO)
    tally_dealloc: FineDuration = field(default_factory=lambda: FineDuration.ZERO)
    tally_realloc: FineDuration = field(default_factory=lambda: FineDuration.ZERO)

    def total_overhead(
        self,
        sample_size: int,
        alloc_count: int = 0,
        dealloc_count: int = 0,
        grow_count: int = 0,
        shrink_count: int = 0,
    ) -> FineDuration:
        """Overhead of one sample of `sample_size` iterations with the given allocation tallies."""
        counts = (sample_size, alloc_count, dealloc_count, grow_count, shrink_count)
        if any(count < 0 for count in counts):
            raise ValueError("sample size and tally counts cannot be negative")

        parts = (
            self.sample_loop.picos * sample_size,
            self.tally_alloc.picos * alloc_count,
            self.tally_dealloc.picos * dealloc_count,
            self.tally_realloc.picos * (grow_count + shrink_count),
        )
        return FineDuration(min(sum(min(part, U128_MAX) for part in parts), U128_MAX))


TimedOverhead.ZERO = TimedOverhead()


@dataclass(frozen=True)
class Timer:
    """A source of time: the OS clock, or the CPU timestamp counter at a known frequency."""

    kind: TimerKind = TimerKind.OS
    frequency: int | None = None

    def __post_init__(self) -> None:
        if self.kind is TimerKind.OS and self.frequency is not None:
            raise ValueError("the OS timer has no counter frequency")
        if self.kind is TimerKind.TSC and (self.frequency is None or self.frequency <= 0):
            raise ValueError("the TSC timer needs a positive frequency")

    @classmethod
    def os(cls) -> Timer:
        """The operating-system timer."""
        return cls(TimerKind.OS)

    @classmethod
    def get_tsc(cls) -> Timer:
        """The CPU timestamp counter timer; raises TscUnavailableError if it cannot be used."""
        return cls(TimerKind.TSC, tsc_frequency())

    @classmethod
    def available(cls) -> list[Timer]:
        """All timers usable on this machine, the OS timer first."""
        timers = [cls.os()]
        try:
            timers.append(cls.get_tsc())
        except TscUnavailableError:
            pass
        return timers

    def _elapsed(self, start: Timestamp, end: Timestamp) -> FineDuration:
        return end.duration_since(start, self.frequency)

    def precision(self) -> FineDuration:
        """Smallest non-zero duration this timer can measure; cached per timer kind."""
        with _cache_lock:
            cached = _precision_cache.get(self.kind)
        if cached is None:
            cached = self.measure_precision()
            with _cache_lock:
                cached = _precision_cache.setdefault(self.kind, cached)
        return cached

    def measure_precision(self) -> FineDuration:
        """Measure the smallest non-zero duration this timer reports."""
        kind = self.kind
        min_sample = FineDuration.MAX
        seen_count = 0

        # When back-to-back readings give zero, widen the gap with a busy loop.
        delay_len = 0

        while True:
            for _ in range(_PRECISION_SAMPLES):
                start = Timestamp.start(kind)
                for _ in range(delay_len):
                    pass
                end = Timestamp.end(kind)

                sample = self._elapsed(start, end)
                if sample.is_zero():
                    continue

                if sample > min_sample:
                    if delay_len > _PRECISION_MAX_DELAY:
                        return min_sample
                elif sample == min_sample:
                    seen_count += 1
                    if seen_count >= _PRECISION_SEEN_THRESHOLD:
                        return min_sample
                else:
                    min_sample = sample
                    seen_count = 0

            delay_len += 1

    def sample_loop_overhead(self) -> FineDuration:
        """Per-iteration overhead of the sample loop; cached per timer kind."""
        with _cache_lock:
            cached = _loop_overhead_cache.get(self.kind)
        if cached is None:
            cached = self.measure_sample_loop_overhead()
            with _cache_lock:
                cached = _loop_overhead_cache.setdefault(self.kind, cached)
        return cached

    def measure_sample_loop_overhead(self) -> FineDuration:
        """Measure the smallest per-iteration cost of an empty sample loop."""
        kind = self.kind
        min_sample = FineDuration.ZERO

        for _ in range(_LOOP_SAMPLE_COUNT):
            start = Timestamp.start(kind)
            for _ in range(_LOOP_SAMPLE_SIZE):
                pass
            end = Timestamp.end(kind)

            sample = self._elapsed(start, end) // _LOOP_SAMPLE_SIZE
            min_sample = min_sample.clamp_to_min(sample)

        return min_sample

    def measure_min_time(
        self, sample_count: int, sample_size: int, operation: Callable[[], object]
    ) -> FineDuration:
        """Smallest non-zero per-call time of `operation`, less the sample loop overhead."""
        if sample_count < 0:
            raise ValueError("sample count cannot be negative")
        if sample_size <= 0:
            raise ValueError("sample size must be positive")

        kind = self.kind
        loop_overhead = self.sample_loop_overhead()
        min_sample = FineDuration.ZERO

        for _ in range(sample_count):
            start = Timestamp.start(kind)
            for _ in range(sample_size):
                operation()
            end = Timestamp.end(kind)

            per_call = self._elapsed(start, end).picos // sample_size
            sample = FineDuration(max(per_call - loop_overhead.picos, 0))
            min_sample = min_sample.clamp_to_min(sample)

        return min_sample

    def bench_overheads(self) -> TimedOverhead:
        """Overheads that measurements should not count as benchmark time; cached per timer kind."""
        with _cache_lock:
            cached = _overheads_cache.get(self.kind)
        if cached is None:
            # No allocation tallying happens here, so tallies add no overhead.
            cached = TimedOverhead(sample_loop=self.sample_loop_overhead())
            with _cache_lock:
                cached = _overheads_cache.setdefault(self.kind, cached)
        return cached