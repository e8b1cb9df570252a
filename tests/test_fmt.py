import pytest

from comfybench.fmt import (
    BytesFormat,
    CounterKind,
    Scale,
    UnitKind,
    format_bytes,
    format_f64,
    format_throughput,
    scale_value,
)


@pytest.mark.parametrize(
    "n, expected_value, expected_scale",
    [
        (1.0, 1.0, Scale.ONE),
        (1_000.0, 1.0, Scale.KILO),
        (1_000_000.0, 1.0, Scale.MEGA),
        (1_000_000_000.0, 1.0, Scale.GIGA),
        (1_000_000_000_000.0, 1.0, Scale.TERA),
        (1_000_000_000_000_000.0, 1.0, Scale.PETA),
    ],
)
def test_scale_value_decimal(n, expected_value, expected_scale):
    assert scale_value(n, BytesFormat.DECIMAL) == (expected_value, expected_scale)


def test_scale_value_binary():
    assert scale_value(1024.0, BytesFormat.BINARY) == (1.0, Scale.KILO)
    assert scale_value(1024.0**2, BytesFormat.BINARY) == (1.0, Scale.MEGA)
    assert scale_value(1000.0, BytesFormat.BINARY) == (1000.0, Scale.ONE)


def test_scale_value_infinite_is_one():
    assert scale_value(float("inf"))[1] == Scale.ONE


@pytest.mark.parametrize(
    "val, sig_figs, expected",
    [
        (1.0, 4, "1"),
        (0.0, 4, "0"),
        (1.2345, 4, "1.234"),
        (100.2, 4, "100.2"),
        (100.02, 4, "100"),
        (59.999, 4, "59.99"),
        (0.102, 4, "0.102"),
        (0.012, 4, "0.012"),
        (0.001, 4, "0.001"),
        (1.5, 0, "1"),
        (1e16, 4, "10000000000000000"),
        (12.0, 1, "12"),
    ],
)
def test_format_f64(val, sig_figs, expected):
    assert format_f64(val, sig_figs) == expected


def test_format_f64_infinite():
    assert format_f64(float("inf"), 4) == "inf"


def test_format_bytes():
    assert format_bytes(0.0, 4, BytesFormat.DECIMAL) == "0 B"
    assert format_bytes(1024.0, 4, BytesFormat.BINARY) == "1 KiB"
    assert format_bytes(1536.0, 4, BytesFormat.BINARY) == "1.5 KiB"
    assert format_bytes(2_000_000.0, 4, BytesFormat.DECIMAL) == "2 MB"


def test_scale_suffixes():
    assert Scale.GIGA.suffix(UnitKind.BYTES, BytesFormat.BINARY) == "GiB"
    assert Scale.TERA.suffix(UnitKind.BYTES_THROUGHPUT, BytesFormat.DECIMAL) == "TB/s"
    assert Scale.MEGA.suffix(UnitKind.CYCLES_THROUGHPUT) == "MHz"
    assert Scale.ONE.suffix(UnitKind.CHARS_THROUGHPUT) == "char/s"
    assert Scale.PETA.suffix(UnitKind.ITEMS_THROUGHPUT) == "Pitem/s"


def test_format_throughput_bytes():
    assert format_throughput(CounterKind.BYTES, 1000, 1e12) == "1 KB/s"
    assert format_throughput(CounterKind.BYTES, 1024, 1e12, BytesFormat.BINARY) == "1 KiB/s"


def test_format_throughput_items():
    assert format_throughput(CounterKind.ITEMS, 1, 1000.0) == "1 Gitem/s"


def test_format_throughput_non_bytes_ignore_binary():
    assert format_throughput(CounterKind.CYCLES, 1000, 1e12, BytesFormat.BINARY) == "1 KHz"


def test_format_throughput_zero_count():
    assert format_throughput(CounterKind.CHARS, 0, 1e12) == "0 char/s"


def test_format_throughput_zero_time():
    assert format_throughput(CounterKind.BYTES, 5, 0.0) == "inf B/s"


def test_format_throughput_width():
    assert format_throughput(CounterKind.BYTES, 1000, 1e12, width=10) == "1 KB/s    "
    assert format_throughput(CounterKind.BYTES, 1000, 1e12, width=2) == "1 KB/s"