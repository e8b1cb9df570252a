"""Benchmarking building blocks: formatting, durations, timestamps, timers and a thread pool."""

__version__ = "0.1.0"

__all__ = ["fmt", "util", "duration", "timestamp", "timer", "thread_pool"]