"""Small general helpers."""

from __future__ import annotations

import functools
import os
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def slice_middle(seq: Sequence[T]) -> Sequence[T]:
    """Return the middle value, or the two middle values for an even length."""
    length = len(seq)
    if length == 0:
        return seq[:]
    if length % 2 == 0:
        return seq[length // 2 - 1 : length // 2 + 1]
    return seq[length // 2 : length // 2 + 1]


@functools.lru_cache(maxsize=None)
def known_parallelism() -> int:
    """Number of CPUs this process may run on, cached; at least 1."""
    if hasattr(os, "sched_getaffinity"):
        try:
            count = len(os.sched_getaffinity(0))
        except OSError:
            count = 0
    else:
        count = 0
    if count <= 0:
        count = os.cpu_count() or 1
    return max(count, 1)


def is_nextest() -> bool:
    """Return True when running under the nextest test runner."""
    return os.environ.get("NEXTEST", "") == "1"