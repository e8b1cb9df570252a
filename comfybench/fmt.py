"""Human-readable formatting of numbers, byte sizes and throughput."""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum, IntEnum


class BytesFormat(IntEnum):
    """How byte quantities are scaled: powers of 1000 or powers of 1024."""

    DECIMAL = 0
    BINARY = 1


class CounterKind(IntEnum):
    """Kinds of quantity that a benchmark can count."""

    BYTES = 0
    CHARS = 1
    CYCLES = 2
    ITEMS = 3


class UnitKind(Enum):
    """The unit family a scaled value is displayed in."""

    BYTES = "bytes"
    BYTES_THROUGHPUT = "bytes_throughput"
    CHARS_THROUGHPUT = "chars_throughput"
    CYCLES_THROUGHPUT = "cycles_throughput"
    ITEMS_THROUGHPUT = "items_throughput"


_SCALE_STARTS = {
    BytesFormat.DECIMAL: (1.0, 1e3, 1e6, 1e9, 1e12, 1e15),
    BytesFormat.BINARY: tuple(float(1024**power) for power in range(6)),
}

_BYTE_SUFFIXES = {
    BytesFormat.DECIMAL: ("B", "KB", "MB", "GB", "TB", "PB"),
    BytesFormat.BINARY: ("B", "KiB", "MiB", "GiB", "TiB", "PiB"),
}

_FIXED_SUFFIXES = {
    UnitKind.CHARS_THROUGHPUT: ("char/s", "Kchar/s", "Mchar/s", "Gchar/s", "Tchar/s", "Pchar/s"),
    UnitKind.CYCLES_THROUGHPUT: ("Hz", "KHz", "MHz", "GHz", "THz", "PHz"),
    UnitKind.ITEMS_THROUGHPUT: ("item/s", "Kitem/s", "Mitem/s", "Gitem/s", "Titem/s", "Pitem/s"),
}

_THROUGHPUT_UNITS = {
    CounterKind.BYTES: UnitKind.BYTES_THROUGHPUT,
    CounterKind.CHARS: UnitKind.CHARS_THROUGHPUT,
    CounterKind.CYCLES: UnitKind.CYCLES_THROUGHPUT,
    CounterKind.ITEMS: UnitKind.ITEMS_THROUGHPUT,
}


class Scale(IntEnum):
    """Metric magnitude of a scaled value."""

    ONE = 0
    KILO = 1
    MEGA = 2
    GIGA = 3
    TERA = 4
    PETA = 5

    def suffix(self, unit: UnitKind, bytes_format: BytesFormat = BytesFormat.DECIMAL) -> str:
        """Return the unit suffix for this scale."""
        if unit is UnitKind.BYTES:
            return _BYTE_SUFFIXES[bytes_format][self]
        if unit is UnitKind.BYTES_THROUGHPUT:
            return _BYTE_SUFFIXES[bytes_format][self] + "/s"
        return _FIXED_SUFFIXES[unit][self]


def _plain_float(val: float) -> str:
    """Shortest round-trip decimal representation without an exponent."""
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "inf" if val > 0 else "-inf"
    text = format(Decimal(repr(val)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_f64(val: float, sig_figs: int) -> str:
    """Format a float, keeping at most `sig_figs` leading characters of digits."""
    text = _plain_float(val)
    dot_index = text.find(".")
    if dot_index < 0:
        return text

    fract_digits = max(sig_figs - dot_index, 0)
    if fract_digits == 0:
        return text[:dot_index]

    fract_start = dot_index + 1
    fract_end = fract_start + fract_digits
    if fract_end > len(text):
        return text

    fract = text[fract_start:fract_end].rstrip("0")
    if not fract:
        return text[:dot_index]
    return text[: fract_start + len(fract)]


def scale_value(value: float, bytes_format: BytesFormat = BytesFormat.DECIMAL) -> tuple[float, Scale]:
    """Divide `value` down to its scale and return both."""
    starts = _SCALE_STARTS[bytes_format]

    if math.isinf(value) or value < starts[1]:
        scale = Scale.ONE
    elif value < starts[2]:
        scale = Scale.KILO
    elif value < starts[3]:
        scale = Scale.MEGA
    elif value < starts[4]:
        scale = Scale.GIGA
    elif value < starts[5]:
        scale = Scale.TERA
    else:
        scale = Scale.PETA

    return value / starts[scale], scale


def format_bytes(val: float, sig_figs: int, bytes_format: BytesFormat = BytesFormat.DECIMAL) -> str:
    """Format a byte quantity such as ``1.5 KiB``."""
    scaled, scale = scale_value(val, bytes_format)
    return f"{format_f64(scaled, sig_figs)} {scale.suffix(UnitKind.BYTES, bytes_format)}"


def format_throughput(
    kind: CounterKind,
    count: int,
    picos: float,
    bytes_format: BytesFormat = BytesFormat.DECIMAL,
    sig_figs: int = 4,
    width: int | None = None,
) -> str:
    """Format `count` units processed in `picos` picoseconds as a rate per second."""
    if count == 0:
        count_per_sec = 0.0
    else:
        per_pico = math.inf if picos == 0 else 1e12 / picos
        count_per_sec = count * per_pico

    unit = _THROUGHPUT_UNITS[CounterKind(kind)]
    scale_format = bytes_format if unit is UnitKind.BYTES_THROUGHPUT else BytesFormat.DECIMAL

    scaled, scale = scale_value(count_per_sec, scale_format)
    text = f"{format_f64(scaled, sig_figs)} {scale.suffix(unit, scale_format)}"

    if width is not None and width > len(text):
        text = text.ljust(width)
    return text