"""Reusable worker threads that run one task at a time across many threads."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

_STOP = object()


class _Task:
    """A function shared by the calling thread and the auxiliary threads."""

    def __init__(self, fn: Callable[[int], object], aux_threads: int) -> None:
        self.fn = fn
        self._remaining = aux_threads
        self._done = threading.Condition()
        self.errors: dict[int, BaseException] = {}

    def run(self, thread_id: int) -> None:
        try:
            self.fn(thread_id)
        except BaseException as error:  # noqa: BLE001 - reported to the caller
            self.errors[thread_id] = error

    def finish_aux(self) -> None:
        with self._done:
            self._remaining -= 1
            if self._remaining == 0:
                self._done.notify_all()

    def wait(self) -> None:
        with self._done:
            self._done.wait_for(lambda: self._remaining == 0)


def _work(channel: queue.Queue[Any], thread_id: int) -> None:
    while True:
        task = channel.get()
        if task is _STOP:
            return
        task.run(thread_id)
        task.finish_aux()


class ThreadPool:
    """Reusable threads for broadcasting a task to a number of threads.

    Only one task runs at a time; broadcasting from two threads makes one
    wait for the other's dispatch. Threads spawned for a large request stay
    alive for later, smaller requests.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channels: list[queue.Queue[Any]] = []

    def par_extend(self, results: list[T | None], aux_threads: int, task: Callable[[int], T]) -> None:
        """Append ``aux_threads + 1`` slots to `results`, filling slot ``i`` with ``task(i)``."""
        if aux_threads < 0:
            raise ValueError("auxiliary thread count cannot be negative")
        old_len = len(results)
        results.extend([None] * (aux_threads + 1))

        def fill(index: int) -> None:
            results[old_len + index] = task(index)

        self.broadcast(aux_threads, fill)

    def broadcast(self, aux_threads: int, task: Callable[[int], object]) -> None:
        """Run ``task(thread_id)`` on the calling thread (id 0) and `aux_threads` workers.

        Returns once every thread has finished. If any thread raised, the
        exception from the calling thread, or else from the lowest worker id,
        is re-raised after all threads are done.
        """
        if aux_threads < 0:
            raise ValueError("auxiliary thread count cannot be negative")

        shared = _Task(task, aux_threads)

        if aux_threads > 0:
            with self._lock:
                missing = aux_threads - len(self._channels)
                if missing > 0:
                    self._spawn(missing)
                for channel in self._channels[:aux_threads]:
                    channel.put(shared)

        shared.run(0)
        shared.wait()

        if shared.errors:
            raise shared.errors[min(shared.errors)]

    def drop_threads(self) -> None:
        """Stop all auxiliary threads; later broadcasts spawn new ones."""
        with self._lock:
            channels, self._channels = self._channels, []
        for channel in channels:
            channel.put(_STOP)

    def aux_thread_count(self) -> int:
        """Number of auxiliary threads currently kept by the pool."""
        with self._lock:
            return len(self._channels)

    def _spawn(self, additional: int) -> None:
        next_id = len(self._channels) + 1
        for thread_id in range(next_id, next_id + additional):
            channel: queue.Queue[Any] = queue.Queue(maxsize=1)
            thread = threading.Thread(
                target=_work,
                args=(channel, thread_id),
                name=f"comfybench-{thread_id}",
                daemon=True,
            )
            thread.start()
            self._channels.append(channel)


BENCH_POOL = ThreadPool()