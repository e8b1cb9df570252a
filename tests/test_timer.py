import time

import pytest

from comfybench.duration import PICOS_PER_MILLI, PICOS_PER_SEC, FineDuration
from comfybench.timer import TimedOverhead, Timer
from comfybench.timestamp import TimerKind, TscUnavailableError, TscUnavailableReason


def test_os_timer_kind():
    timer = Timer.os()
    assert timer.kind is TimerKind.OS
    assert timer.frequency is None


def test_get_tsc_unavailable():
    with pytest.raises(TscUnavailableError) as info:
        Timer.get_tsc()
    assert info.value.reason is TscUnavailableReason.UNIMPLEMENTED


def test_available_lists_os_first():
    timers = Timer.available()
    assert timers[0] == Timer.os()
    assert timers == [Timer.os()]


def test_invalid_timer_construction():
    with pytest.raises(ValueError):
        Timer(TimerKind.OS, 1000)
    with pytest.raises(ValueError):
        Timer(TimerKind.TSC, None)
    with pytest.raises(ValueError):
        Timer(TimerKind.TSC, 0)


def test_precision_is_nonzero_and_cached():
    timer = Timer.os()
    first = timer.precision()
    second = timer.precision()
    assert first == second
    assert not first.is_zero()
    assert first < FineDuration(PICOS_PER_SEC)


def test_measure_precision_nonzero():
    result = Timer.os().measure_precision()
    assert not result.is_zero()
    assert result < FineDuration.MAX


def test_sample_loop_overhead_cached():
    timer = Timer.os()
    assert timer.sample_loop_overhead() == timer.sample_loop_overhead()
    assert timer.sample_loop_overhead() < FineDuration(PICOS_PER_MILLI)


def test_measure_sample_loop_overhead_bounded():
    result = Timer.os().measure_sample_loop_overhead()
    assert result < FineDuration(PICOS_PER_MILLI)


def test_measure_min_time_calls_operation():
    calls = []
    Timer.os().measure_min_time(3, 7, lambda: calls.append(None))
    assert len(calls) == 3 * 7


def test_measure_min_time_no_samples():
    calls = []
    result = Timer.os().measure_min_time(0, 10, lambda: calls.append(None))
    assert result == FineDuration.ZERO
    assert calls == []


def test_measure_min_time_sleep_lower_bound():
    timer = Timer.os()
    overhead = timer.sample_loop_overhead()
    result = timer.measure_min_time(2, 1, lambda: time.sleep(0.001))
    assert result.picos >= PICOS_PER_MILLI - overhead.picos


def test_measure_min_time_rejects_bad_sizes():
    timer = Timer.os()
    with pytest.raises(ValueError):
        timer.measure_min_time(1, 0, lambda: None)
    with pytest.raises(ValueError):
        timer.measure_min_time(-1, 1, lambda: None)


def test_bench_overheads_cached_and_uses_loop_overhead():
    timer = Timer.os()
    overheads = timer.bench_overheads()
    assert timer.bench_overheads() is overheads
    assert overheads.sample_loop == timer.sample_loop_overhead()


def test_total_overhead_zero():
    assert TimedOverhead.ZERO.total_overhead(1000, 5, 5, 5, 5) == FineDuration.ZERO


def test_total_overhead_sample_loop_only():
    overhead = TimedOverhead(sample_loop=FineDuration(10))
    assert overhead.total_overhead(3) == FineDuration(30)


def test_total_overhead_grow_and_shrink_share_realloc():
    overhead = TimedOverhead(
        sample_loop=FineDuration(1),
        tally_alloc=FineDuration(2),
        tally_dealloc=FineDuration(3),
        tally_realloc=FineDuration(4),
    )
    assert overhead.total_overhead(0, 0, 0, 1, 0) == overhead.total_overhead(0, 0, 0, 0, 1)
    assert overhead.total_overhead(0, 0, 0, 1, 0) == overhead.tally_realloc


def test_total_overhead_is_additive():
    overhead = TimedOverhead(
        sample_loop=FineDuration(7),
        tally_alloc=FineDuration(11),
        tally_dealloc=FineDuration(13),
        tally_realloc=FineDuration(17),
    )
    combined = overhead.total_overhead(2, 1, 1, 0, 0)
    parts = (
        overhead.total_overhead(2, 0, 0, 0, 0)
        + overhead.total_overhead(0, 1, 0, 0, 0)
        + overhead.total_overhead(0, 0, 1, 0, 0)
    )
    assert combined == parts


def test_total_overhead_saturates():
    overhead = TimedOverhead(sample_loop=FineDuration.MAX, tally_alloc=FineDuration.MAX)
    assert overhead.total_overhead(2, 2) == FineDuration.MAX


def test_total_overhead_rejects_negative():
    with pytest.raises(ValueError):
        TimedOverhead.ZERO.total_overhead(-1)
    with pytest.raises(ValueError):
        TimedOverhead.ZERO.total_overhead(1, -1)