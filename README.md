# comfybench

Building blocks for benchmarking in Python. The package has no runtime
dependencies.

## What is inside

- `comfybench.fmt` formats numbers and scales quantities into readable units.
  - `format_f64(val, sig_figs)` cuts a float down to a number of significant
    characters and drops trailing zeros.
  - `scale_value(value, bytes_format)` returns the scaled value and its `Scale`.
    The `Scale` runs from `ONE` through `KILO`, `MEGA`, `GIGA` and `TERA` to
    `PETA`.
  - `format_bytes(val, sig_figs, bytes_format)` formats a byte quantity.
    `BytesFormat.DECIMAL` uses powers of 1000 and `BytesFormat.BINARY` uses
    powers of 1024.
  - `format_throughput(kind, count, picos, ...)` formats a rate per second for
    a `CounterKind` of `BYTES`, `CHARS`, `CYCLES` or `ITEMS`.
- `comfybench.util` holds small helpers.
  - `slice_middle(seq)` returns the middle value, or the two middle values for
    an even length.
  - `known_parallelism()` returns the cached number of usable CPUs.
  - `is_nextest()` checks the `NEXTEST` environment variable.
- `comfybench.duration` holds `FineDuration`, a non-negative duration in whole
  picoseconds.
  - It displays itself in the fitting `TimeScale`, from `ps` through `ns`, `µs`,
    `ms`, `s`, `m` and `h` to `d`.
  - It supports `format(sig_figs, width)` and format specs such as `{d:.2}` and
    `{d:<12}`.
  - It also has `clamp_to`, `clamp_to_min`, `+` and `//`.
  - `into_duration` turns seconds, given as an int or a float, into a
    `timedelta`. It also accepts a `timedelta`.
- `comfybench.timestamp` takes and compares timestamps.
  - `Timestamp.start`/`Timestamp.end` take timestamps from the OS clock
    (`TimerKind.OS`, which uses `time.perf_counter_ns`).
  - `TscTimestamp.duration_since` converts counter ticks at a given frequency.
  - `nominal_frequency` parses the frequency out of a CPU brand name such as
    `"... @ 2.50GHz"`.
  - `choose_frequency` prefers the nominal frequency when it lies within 0.1%
    of the measured one.
  - `measure_frequency(measure_once)` repeats a measurement with growing delays
    until two readings agree.
- `comfybench.timer` holds `Timer`.
  - It measures the timer's own precision (`precision`, `measure_precision`).
  - It measures the per-iteration cost of the sample loop
    (`sample_loop_overhead`).
  - `measure_min_time` gives the smallest per-call time of an operation.
  - `bench_overheads` returns a `TimedOverhead`. Its `total_overhead` adds up
    the overhead of one sample.
- `comfybench.thread_pool` holds `ThreadPool`.
  - `broadcast(aux_threads, task)` runs `task(thread_id)` on the calling thread
    (id 0) and on reusable worker threads.
  - `par_extend` collects each thread's result into a list.
  - An exception raised in any thread is re-raised once all threads finish.

## Examples

```python
from comfybench.duration import FineDuration
from comfybench.fmt import BytesFormat, CounterKind, format_bytes, format_throughput

print(FineDuration(1_234_567))                         # 1.234 µs
print(format_bytes(1536, 4, BytesFormat.BINARY))       # 1.5 KiB
print(format_throughput(CounterKind.BYTES, 1000, 1e12))  # 1 KB/s
```

```python
from comfybench.thread_pool import ThreadPool

pool = ThreadPool()
results = []
pool.par_extend(results, 3, lambda index: index * index)
print(results)                         # [0, 1, 4, 9]
pool.drop_threads()
```

```python
from comfybench.timer import Timer

timer = Timer.os()
print(timer.precision())               # smallest measurable non-zero duration
print(timer.bench_overheads().total_overhead(1000))
```

## What it does not do

- There is no benchmark runner and no command to run. The package does not
  discover, sort or run benchmarks.
- It does not print reports of results. Formatting helpers are provided; a
  report layout is not.
- The CPU timestamp counter cannot be read.
  - `tsc_frequency()` and `Timer.get_tsc()` raise `TscUnavailableError` with
    reason `UNIMPLEMENTED`.
  - `Timer.available()` therefore returns only the OS timer.
- Allocations are not counted. `bench_overheads` reports zero allocation
  tally overheads.

## Running the tests

```
pip install -e ".[test]"
pytest
```